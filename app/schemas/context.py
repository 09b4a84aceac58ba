import datetime
from typing import Dict,Any,List,Optional
from pydantic import BaseModel,Field

from app.models.common import ContextID


class ContextCreate(BaseModel):
    id:ContextID
    data:Dict[str,Any]=Field(default_factory=dict,description="Inheritable key-value data")
    metadata:Dict[str,str]=Field(default_factory=dict,description="Tags that are not inherited")
    source:str=Field("",description="Subsystem that created the context")
    expires_at:Optional[datetime.datetime]=None


class ContextUpdate(BaseModel):
    data:Optional[Dict[str,Any]]=Field(None,description="Replaces data wholesale when non-empty")
    metadata:Optional[Dict[str,str]]=Field(None,description="Replaces metadata wholesale when given")


class ContextLink(BaseModel):
    parent_id:ContextID


class ContextResponse(BaseModel):
    id:str
    data:Dict[str,Any]
    metadata:Dict[str,str]
    created_at:datetime.datetime
    updated_at:datetime.datetime
    expires_at:Optional[datetime.datetime]=None
    parent_id:Optional[str]=None
    children_ids:List[str]
    source:str


class InheritedContextResponse(BaseModel):
    id:str
    context_data:Dict[str,Any]
