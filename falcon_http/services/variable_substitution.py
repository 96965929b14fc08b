"""
Variable substitution service for replacing {{VARIABLE}} placeholders.

Placeholders take two forms:

    {{KEY}}          the variable's value, verbatim
    {{KEY[ARGS]}}    the variable's value used as a template

ARGS is a comma separated list. Bare tokens (``www, 3``) are positional and
fill ``$0``, ``$1``, ... in the value; ``name: value`` tokens are named and
fill ``$name``. Unknown keys are left in place.
"""

import re
from typing import Iterable, List, Mapping, Tuple


# Pattern to match {{KEY}} and {{KEY[args]}} placeholders
VARIABLE_PATTERN = re.compile(r'\{\{([A-Z0-9_]+)(\[(.*?)\])?\}\}')

# $0, $1, ... or $name inside a value template
TEMPLATE_TOKEN_PATTERN = re.compile(r'\$(\d+|[A-Za-z_][A-Za-z0-9_]*)')

# "name: value"; a colon followed by // belongs to a URL, not a name
NAMED_ARGUMENT_PATTERN = re.compile(r'^([A-Za-z_][A-Za-z0-9_]*)\s*:(?!//)\s*(.*)$', re.DOTALL)


def _clean(token: str) -> str:
    return token.strip().strip('"\'')


def parse_arguments(args: str) -> Tuple[List[str], dict[str, str]]:
    """
    Split a placeholder argument list into positional and named arguments.

    Example:
        >>> parse_arguments('www, 3')
        (['www', '3'], {})
        >>> parse_arguments('version: 2, sub: "app"')
        ([], {'version': '2', 'sub': 'app'})
    """
    positional: List[str] = []
    named: dict[str, str] = {}

    if not args:
        return positional, named

    for raw in args.split(','):
        token = _clean(raw)
        match = NAMED_ARGUMENT_PATTERN.match(token)
        if match:
            named[match.group(1)] = _clean(match.group(2))
        else:
            positional.append(token)

    return positional, named


def resolve_template(value_template: str, args: str) -> str:
    """
    Fill a variable's value template with placeholder arguments.

    An empty argument list returns the template unchanged. Tokens with no
    matching argument are kept as written.
    """
    if not args:
        return value_template

    positional, named = parse_arguments(args)

    def replace_token(match: re.Match) -> str:
        token = match.group(1)
        if token.isdigit():
            index = int(token)
            if index < len(positional):
                return positional[index]
            return match.group(0)
        return named.get(token, match.group(0))

    return TEMPLATE_TOKEN_PATTERN.sub(replace_token, value_template)


def variables_from_pairs(pairs: Iterable[Tuple[str, str]]) -> dict[str, str]:
    """Build a lookup map from key/value pairs; a later duplicate key wins."""
    return {key: value for key, value in pairs}


def extract_variables(template: str) -> List[str]:
    """
    Extract all variable names from a template string.

    Args:
        template: String containing {{KEY}} or {{KEY[args]}} placeholders

    Returns:
        List of variable names found in the template

    Example:
        >>> extract_variables("{{HOST}}/users/{{USER_ID[me]}}")
        ['HOST', 'USER_ID']
    """
    if not template:
        return []

    return [match.group(1) for match in VARIABLE_PATTERN.finditer(template)]


def substitute(template: str, variables: Mapping[str, str]) -> Tuple[str, List[str]]:
    """
    Replace variable placeholders in a template with their values.

    Args:
        template: String containing placeholders
        variables: Dictionary mapping variable names to value templates

    Returns:
        Tuple of (substituted string, list of unmatched variable names)

    Example:
        >>> substitute("{{HOST}}/users", {"HOST": "https://api.test"})
        ('https://api.test/users', [])
        >>> substitute("{{HOST}}/users", {})
        ('{{HOST}}/users', ['HOST'])
    """
    if not template:
        return template, []

    unmatched: List[str] = []

    def replace_match(match: re.Match) -> str:
        var_name = match.group(1)
        if var_name in variables:
            return resolve_template(variables[var_name], match.group(3) or "")
        else:
            unmatched.append(var_name)
            return match.group(0)  # Keep original placeholder

    result = VARIABLE_PATTERN.sub(replace_match, template)
    return result, unmatched


def replace_variables(template: str, variables: Mapping[str, str]) -> str:
    """Substitute placeholders, ignoring which keys were unknown."""
    result, _ = substitute(template, variables)
    return result


def substitute_pairs(
    pairs: Iterable[Tuple[str, str]],
    variables: Mapping[str, str]
) -> Tuple[List[Tuple[str, str]], List[str]]:
    """
    Substitute keys and values of non-blank pairs.

    Pairs whose key is blank are dropped, order and duplicates are kept.

    Returns:
        Tuple of (substituted pairs, list of all unmatched variable names)
    """
    result: List[Tuple[str, str]] = []
    all_unmatched: List[str] = []

    for key, value in pairs:
        if not key.strip():
            continue
        new_key, key_unmatched = substitute(key, variables)
        new_value, value_unmatched = substitute(value, variables)
        result.append((new_key, new_value))
        all_unmatched.extend(key_unmatched)
        all_unmatched.extend(value_unmatched)

    return result, all_unmatched
