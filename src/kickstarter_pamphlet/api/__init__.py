from kickstarter_pamphlet.api.client import KickstarterClient
from kickstarter_pamphlet.api.errors import CouldNotParseJSON, GraphQLError, KickstarterAPIError
from kickstarter_pamphlet.api.mock_service import MockService
from kickstarter_pamphlet.api.parser import parse_backing, parse_project, parse_user
from kickstarter_pamphlet.api.query_data import project_from_query, project_pamphlet_data_from_query
from kickstarter_pamphlet.api.reward_parser import parse_reward

__all__ = [
    "KickstarterClient",
    "MockService",
    "KickstarterAPIError",
    "CouldNotParseJSON",
    "GraphQLError",
    "parse_project",
    "parse_reward",
    "parse_backing",
    "parse_user",
    "project_from_query",
    "project_pamphlet_data_from_query",
]
