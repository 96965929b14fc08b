"""
Request URL composer.

A stored request URL may start with a sentinel that stands for the owning
project's base URL, so the same request keeps working when the active
environment (and with it the base URL) changes:

    {{%PROJECT_BASE_URL%}}/users
    {{%PROJECT_BASE_URL[v2]%}}/users

``build`` turns the stored form into something sendable, ``extract`` turns
a typed URL back into the stored form.
"""

import re


# {{NAME}} with nothing around it
VARIABLE_REFERENCE_PATTERN = re.compile(r'^\{\{[A-Za-z0-9_]+\}\}$')

# Sentinel carrying placeholder arguments, only at the start of the URL
BRACKETED_PLACEHOLDER_PATTERN = re.compile(r'^\{\{%PROJECT_BASE_URL\[(.*?)\]%\}\}')


def is_variable_reference(value: str) -> bool:
    """True when value is exactly one ``{{NAME}}`` placeholder."""
    return bool(VARIABLE_REFERENCE_PATTERN.match(value))


class RequestUrl:
    """A request URL as stored on a PendingRequest."""

    BASE_URL_PLACEHOLDER = "{{%PROJECT_BASE_URL%}}"

    def __init__(self, url: str = ""):
        self.url = url

    def __str__(self) -> str:
        return self.url

    def __repr__(self) -> str:
        return f"RequestUrl({self.url!r})"

    def __eq__(self, other: object) -> bool:
        if isinstance(other, RequestUrl):
            return self.url == other.url
        return NotImplemented

    def build(self, base_url: str) -> str:
        """
        Materialize the stored URL against a base URL.

        - A leading bare sentinel is replaced by base_url verbatim.
        - With an empty base_url a leading ``[args]`` sentinel is dropped.
        - With a ``{{NAME}}`` base_url a leading ``[args]`` sentinel becomes
          ``{{NAME[args]}}``.
        - Anything else is returned unchanged.
        """
        url = self.url

        if url.startswith(self.BASE_URL_PLACEHOLDER):
            return url.replace(self.BASE_URL_PLACEHOLDER, base_url, 1)

        if not base_url:
            return BRACKETED_PLACEHOLDER_PATTERN.sub("", url, count=1)

        if not is_variable_reference(base_url):
            return url

        inner = base_url[2:-2]
        return BRACKETED_PLACEHOLDER_PATTERN.sub(
            lambda match: "{{" + inner + "[" + match.group(1) + "]}}",
            url,
            count=1,
        )

    def extract(self, base_url: str) -> str:
        """
        Convert a typed URL back to the stored sentinel form.

        Example:
            >>> RequestUrl("{{SOME[extra]}}/path").extract("{{SOME}}")
            '{{%PROJECT_BASE_URL[extra]%}}/path'
        """
        url = self.url

        if not base_url:
            return url

        if url.startswith(base_url):
            return url.replace(base_url, self.BASE_URL_PLACEHOLDER, 1)

        if not is_variable_reference(base_url):
            return url

        inner = base_url[2:-2]
        with_arguments = re.compile(r'^\{\{' + re.escape(inner) + r'\[(.*?)\]\}\}')
        return with_arguments.sub(
            lambda match: "{{%PROJECT_BASE_URL[" + match.group(1) + "]%}}",
            url,
            count=1,
        )
