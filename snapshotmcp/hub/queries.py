"""
GraphQL query builders for the Snapshot hub.

Each builder is a pure function of (identifier, pagination options) to a
query document plus its variable mapping. Every caller-supplied value is
bound through GraphQL variables; nothing is interpolated into query text.
Pagination values are used as given: clamping belongs to the tool layer.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class GraphQLRequest:
    operation: str
    query: str
    variables: dict[str, Any] = field(default_factory=dict)

    def to_payload(self) -> dict[str, Any]:
        payload: dict[str, Any] = {"query": self.query, "variables": self.variables}
        if self.operation:
            payload["operationName"] = self.operation
        return payload


SPACE_QUERY = """
query GetSpace($id: String!) {
  space(id: $id) {
    id
    name
    about
    network
    symbol
    avatar
    website
    twitter
    github
    private
    domain
    members
    admins
    categories
    followersCount
    proposalsCount
    strategies {
      name
      params
    }
    voting {
      delay
      period
      type
      quorum
    }
  }
}
"""

SPACES_QUERY = """
query GetSpaces(
  $first: Int!
  $skip: Int!
  $orderBy: String!
  $orderDirection: OrderDirection!
  $where: SpaceWhere
) {
  spaces(
    first: $first
    skip: $skip
    orderBy: $orderBy
    orderDirection: $orderDirection
    where: $where
  ) {
    id
    name
    about
    network
    symbol
    avatar
    categories
    followersCount
    proposalsCount
    private
  }
}
"""

PROPOSAL_QUERY = """
query GetProposal($id: String!) {
  proposal(id: $id) {
    id
    ipfs
    title
    body
    choices
    start
    end
    snapshot
    state
    author
    created
    updated
    type
    strategies {
      name
      network
      params
    }
    plugins
    network
    symbol
    privacy
    validation {
      name
      params
    }
    space {
      id
      name
      avatar
      symbol
    }
    scores_state
    scores_total
    scores
    votes
    discussion
    app
  }
}
"""

PROPOSALS_QUERY = """
query GetProposals(
  $first: Int!
  $skip: Int!
  $orderBy: String!
  $orderDirection: OrderDirection!
  $where: ProposalWhere
) {
  proposals(
    first: $first
    skip: $skip
    orderBy: $orderBy
    orderDirection: $orderDirection
    where: $where
  ) {
    id
    ipfs
    title
    body
    choices
    start
    end
    snapshot
    state
    author
    created
    type
    space {
      id
      name
      avatar
      symbol
    }
    scores_state
    scores_total
    scores
    votes
    discussion
  }
}
"""

VOTES_QUERY = """
query GetVotes(
  $proposal: String!
  $first: Int!
  $skip: Int!
  $orderBy: String!
  $orderDirection: OrderDirection!
) {
  votes(
    where: { proposal: $proposal }
    first: $first
    skip: $skip
    orderBy: $orderBy
    orderDirection: $orderDirection
  ) {
    id
    voter
    choice
    vp
    vp_by_strategy
    created
    proposal {
      id
      choices
    }
    space {
      id
    }
    reason
    app
  }
}
"""

USER_QUERY = """
query GetUser($id: String!) {
  user(id: $id) {
    id
    name
    about
    avatar
    created
    votesCount
    proposalsCount
  }
}
"""

FOLLOWS_QUERY = """
query GetUserFollows(
  $follower: String!
  $first: Int!
  $skip: Int!
) {
  follows(
    where: { follower: $follower }
    first: $first
    skip: $skip
  ) {
    id
    follower
    space {
      id
      name
      about
      avatar
      followersCount
    }
    created
  }
}
"""


def space_query(space_id: str) -> GraphQLRequest:
    return GraphQLRequest("GetSpace", SPACE_QUERY, {"id": space_id})


def spaces_query(
    *,
    first: int = 20,
    skip: int = 0,
    order_by: str = "created",
    order_direction: str = "desc",
    where: dict[str, Any] | None = None,
) -> GraphQLRequest:
    return GraphQLRequest(
        "GetSpaces",
        SPACES_QUERY,
        {
            "first": first,
            "skip": skip,
            "orderBy": order_by,
            "orderDirection": order_direction,
            "where": where or {},
        },
    )


def proposal_query(proposal_id: str) -> GraphQLRequest:
    return GraphQLRequest("GetProposal", PROPOSAL_QUERY, {"id": proposal_id})


def proposals_query(
    *,
    first: int = 20,
    skip: int = 0,
    order_by: str = "created",
    order_direction: str = "desc",
    where: dict[str, Any] | None = None,
) -> GraphQLRequest:
    return GraphQLRequest(
        "GetProposals",
        PROPOSALS_QUERY,
        {
            "first": first,
            "skip": skip,
            "orderBy": order_by,
            "orderDirection": order_direction,
            "where": where or {},
        },
    )


def votes_query(
    proposal_id: str,
    *,
    first: int = 1000,
    skip: int = 0,
    order_by: str = "created",
    order_direction: str = "desc",
) -> GraphQLRequest:
    return GraphQLRequest(
        "GetVotes",
        VOTES_QUERY,
        {
            "proposal": proposal_id,
            "first": first,
            "skip": skip,
            "orderBy": order_by,
            "orderDirection": order_direction,
        },
    )


def user_query(address: str) -> GraphQLRequest:
    return GraphQLRequest("GetUser", USER_QUERY, {"id": address.lower()})


def follows_query(address: str, *, first: int = 20, skip: int = 0) -> GraphQLRequest:
    return GraphQLRequest(
        "GetUserFollows",
        FOLLOWS_QUERY,
        {"follower": address.lower(), "first": first, "skip": skip},
    )
