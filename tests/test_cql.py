import pytest
from confluence_mcp.core.cql import build_page_search_cql, clamp_limit, escape_cql_literal


def test_escape_quotes_and_backslashes():
    assert escape_cql_literal('a"b') == 'a\\"b'
    assert escape_cql_literal("C:\\temp") == "C:\\\\temp"
    # backslash escaped before quotes so an escaped quote cannot be unescaped
    assert escape_cql_literal('\\"') == '\\\\\\"'


def test_build_cql_with_space_and_query():
    cql = build_page_search_cql('a"b', "SP")
    assert cql == 'type=page AND space="SP" AND (title~"a\\"b" OR text~"a\\"b")'


def test_build_cql_without_query_or_space():
    assert build_page_search_cql("   ") == "type=page"
    assert build_page_search_cql("", None) == "type=page"


def test_build_cql_trims_query():
    assert build_page_search_cql("  runbook ") == (
        'type=page AND (title~"runbook" OR text~"runbook")'
    )


def test_space_key_injection_is_escaped():
    cql = build_page_search_cql("", 'X" OR space="Y')
    assert cql == 'type=page AND space="X\\" OR space=\\"Y"'


@pytest.mark.parametrize(
    "limit, expected", [(100, 50), (50, 50), (0, 1), (-5, 1), (10, 10), (None, 10)]
)
def test_clamp_limit(limit, expected):
    assert clamp_limit(limit) == expected
