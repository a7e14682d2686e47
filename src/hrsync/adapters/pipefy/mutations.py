"""GraphQL documents sent to Pipefy.

Field values are inlined as string literals, so every value goes through
``gql_escape`` first.
"""

from __future__ import annotations

import re
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Mapping

PHASE_CARDS_QUERY = """
query GetActiveCards($phaseId: ID!, $pageSize: Int!, $after: String) {
  phase(id: $phaseId) {
    id
    name
    cards(first: $pageSize, after: $after) {
      pageInfo {
        hasNextPage
        endCursor
      }
      edges {
        node {
          id
          title
          fields {
            name
            value
          }
        }
      }
    }
  }
}
"""

_ALIAS_UNSAFE = re.compile(r"[^a-zA-Z0-9_]")


def gql_escape(value: object) -> str:
    text = "" if value is None else str(value)
    return (
        text.replace("\\", "\\\\")
        .replace('"', '\\"')
        .replace("\r", "\\r")
        .replace("\n", "\\n")
    )


def field_alias(field_id: str) -> str:
    return f"f_{_ALIAS_UNSAFE.sub('_', field_id)}"


def update_fields_mutation(card_id: str, values: Mapping[str, str]) -> str:
    """One ``updateCardField`` per entry, aliased by field id, in a single document."""

    if not values:
        raise ValueError("update_fields_mutation needs at least one field")

    operations = [
        f"""  {field_alias(field_id)}: updateCardField(
    input: {{
      card_id: "{gql_escape(card_id)}",
      field_id: "{gql_escape(field_id)}",
      new_value: "{gql_escape(value)}"
    }}
  ) {{
    card {{ id }}
  }}"""
        for field_id, value in values.items()
    ]
    body = "\n".join(operations)
    return f"mutation {{\n{body}\n}}"


def create_card_mutation(pipe_id: int, values: Mapping[str, str]) -> str:
    attributes = ",\n      ".join(
        f'{{ field_id: "{gql_escape(field_id)}", field_value: "{gql_escape(value)}" }}'
        for field_id, value in values.items()
    )
    return f"""mutation {{
  createCard(input: {{
    pipe_id: {int(pipe_id)},
    fields_attributes: [
      {attributes}
    ]
  }}) {{
    card {{
      id
      title
    }}
  }}
}}"""
