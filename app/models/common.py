from typing import TypeAlias
from pydantic import Field
from typing_extensions import Annotated

ContextID:TypeAlias=Annotated[str,Field(...,min_length=1,max_length=255,description="Unique identifier of a context")]
PrincipalID:TypeAlias=Annotated[str,Field(...,min_length=1,max_length=255,description="Identifier of a caller allowed to dispatch requests")]
