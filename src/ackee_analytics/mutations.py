"""GraphQL mutations understood by the Ackee API.

Each builder pairs a fixed query string with its variables and the
decoder for the mutation's ``data`` object.  Values only ever travel in
``variables``; the query text never changes between calls.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Dict, Generic, TypeVar

from ackee_analytics.events import ActionInput, Attributes
from ackee_analytics.parser import GraphQLResponseParser

T = TypeVar("T")


CREATE_RECORD_QUERY = (
    "mutation createRecord($domainId:ID!,$input:CreateRecordInput!)"
    "{createRecord(domainId:$domainId,input:$input){payload{id}}}"
)
UPDATE_RECORD_QUERY = (
    "mutation updateRecord($recordId:ID!){updateRecord(id:$recordId){success}}"
)
CREATE_ACTION_QUERY = (
    "mutation createAction($eventId:ID!,$input:CreateActionInput!)"
    "{createAction(eventId:$eventId,input:$input){payload{id}}}"
)


def operation_name(query: str) -> str:
    """``"mutation createRecord($domainId:ID!,...)..."`` -> ``"createRecord"``

    Returns ``"?"`` when the query has no recognizable head.
    """
    head = query.split("(", 1)[0].split("{", 1)[0].split()
    return head[-1] if head else "?"


@dataclass(frozen=True)
class GraphQLRequest(Generic[T]):
    """Wire envelope ``{query, variables}`` plus the matching decoder."""

    query: str
    variables: Dict[str, Any]
    decode: Callable[[Dict[str, Any]], T]

    def to_payload(self) -> Dict[str, Any]:
        return {"query": self.query, "variables": self.variables}


@dataclass(frozen=True)
class CreateRecord:
    domain_id: str
    input: Attributes

    @property
    def request(self) -> GraphQLRequest[str]:
        return GraphQLRequest(
            query=CREATE_RECORD_QUERY,
            variables={"domainId": self.domain_id, "input": self.input.to_input()},
            decode=GraphQLResponseParser.record_id,
        )


@dataclass(frozen=True)
class UpdateRecord:
    record_id: str

    @property
    def request(self) -> GraphQLRequest[bool]:
        return GraphQLRequest(
            query=UPDATE_RECORD_QUERY,
            variables={"recordId": self.record_id},
            decode=GraphQLResponseParser.update_success,
        )


@dataclass(frozen=True)
class CreateAction:
    event_id: str
    input: ActionInput

    @property
    def request(self) -> GraphQLRequest[str]:
        return GraphQLRequest(
            query=CREATE_ACTION_QUERY,
            variables={"eventId": self.event_id, "input": self.input.to_input()},
            decode=GraphQLResponseParser.action_id,
        )
