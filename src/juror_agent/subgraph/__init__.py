"""Subgraph transport and case data accessors."""

from juror_agent.subgraph.case_source import CaseDataSource
from juror_agent.subgraph.client import GraphQLClient, GraphQLError, HttpClientFactory

__all__ = ["CaseDataSource", "GraphQLClient", "GraphQLError", "HttpClientFactory"]
