"""CloudFront Function rewriting viewer requests for the Hugo site."""

from collections.abc import Mapping

from aws_cdk import Annotations
from aws_cdk import aws_cloudfront as cloudfront
from constructs import Construct

from ..config import BasicAuthCredentials

AUTH_REALM = "Enter credentials for this super secure site"


def _redirect_block(redirect_replacements: Mapping[str, str]) -> str:
  """Permanent redirect when any pattern matches.

  Every replacement is applied in order once any pattern matches, not only
  the matching one. Patterns and replacements are inserted as-is.
  """
  patterns = ",".join(redirect_replacements)
  replacements = "".join(
    f"    request.uri = request.uri.replace({pattern}, '{replacement}');\n"
    for pattern, replacement in redirect_replacements.items()
  )
  return f"""
  var regexes = [{patterns}];

  if (regexes.some(regex => regex.test(request.uri))) {{
{replacements}
    var response = {{
      statusCode: 301,
      statusDescription: "Moved Permanently",
      headers:
          {{ "location": {{ "value": request.uri }} }}
    }}
    return response;
  }}
"""


def _auth_block(basic_auth: BasicAuthCredentials) -> str:
  return f"""
  // The Authorization header must be 'Basic base64(username:password)'
  var expected = "{basic_auth.header_value}";

  if (!authHeaders || authHeaders.value !== expected) {{
    // Ask the browser to show the Basic Auth dialog
    return {{
      statusCode: 401,
      statusDescription: "Unauthorized",
      headers: {{
        "www-authenticate": {{
          value: 'Basic realm="{AUTH_REALM}"',
        }},
      }},
    }};
  }}
"""


def render_function_code(
  redirect_replacements: Mapping[str, str] | None = None,
  basic_auth: BasicAuthCredentials | None = None,
) -> str:
  """Render the viewer-request handler.

  Args:
    redirect_replacements: Ordered mapping of regular expression literal to
      replacement string. Empty or None emits no redirect block.
    basic_auth: Credentials to require. None emits no auth block.

  Returns:
    JavaScript source for the CloudFront Functions runtime.
  """
  redirect_replacements = redirect_replacements or {}
  requires_auth = basic_auth is not None

  code = """
function handler(event) {
  var request = event.request;
  var uri = request.uri;
"""
  if requires_auth:
    code += "  var authHeaders = request.headers.authorization;\n"
  if redirect_replacements:
    code += _redirect_block(redirect_replacements)
  if basic_auth is not None:
    code += _auth_block(basic_auth)
  code += """
  // Check whether the URI is missing a file name.
  if (uri.endsWith('/')) {
    request.uri += 'index.html';
  }
  // Check whether the URI is missing a file extension.
  else if (!uri.includes('.')) {
    request.uri += '/index.html';
  }

  return request;
}
"""
  return code


class EdgeFunction(Construct):
  """CloudFront Function for URL redirects, basic auth and index.html rewrites.

  A custom function code takes precedence over the generated one; the
  redirect replacements are ignored in that case.
  """

  def __init__(
    self,
    scope: Construct,
    id: str,
    *,
    redirect_replacements: Mapping[str, str] | None = None,
    basic_auth: BasicAuthCredentials | None = None,
    custom_function_code: str | None = None,
  ) -> None:
    super().__init__(scope, id)

    if custom_function_code is not None:
      if redirect_replacements:
        Annotations.of(self).add_warning_v2(
          "hugo-pipeline:redirectReplacementsIgnored",
          "redirect replacements are ignored when a custom function code is set",
        )
      self.code = custom_function_code
    else:
      self.code = render_function_code(redirect_replacements, basic_auth)

    self.function = cloudfront.Function(
      self,
      "redirect-request-cf",
      code=cloudfront.FunctionCode.from_inline(self.code),
    )
