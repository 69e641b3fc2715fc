"""REST clients and the request-building pipeline.

- :class:`RestClient` / :class:`AsyncRestClient` -- execute requests.
- :func:`~simplerest.client.builder.merge_parameters` and
  :func:`~simplerest.client.builder.build_uri` -- pure URL assembly.
- :func:`~simplerest.client.configurator.configure_http` -- fill the
  transport object.
- :func:`~simplerest.client.mapper.convert_to_rest_response` -- map the
  transport answer.
"""

from simplerest.client.async_client import AsyncRestClient
from simplerest.client.builder import build_uri, merge_parameters
from simplerest.client.configurator import configure_http
from simplerest.client.mapper import convert_to_rest_response
from simplerest.client.sync_client import RestClient

__all__ = [
    "AsyncRestClient",
    "RestClient",
    "build_uri",
    "configure_http",
    "convert_to_rest_response",
    "merge_parameters",
]
