"""
Team reference parsing.

A team reference is either a literal team ID, a structured reference of the
form "{STAGE:GROUP:SELECTOR:QUALIFIER}", or a ternary
"A==B?C:D" choosing between C and D depending on whether A and B name the
same team. Parsing only checks the shape of a reference; whether the
stage, group or match it names exists is checked by the resolver.
"""

from typing import NamedTuple, Optional, Union

from vbcompetitions.exceptions import ReferenceSyntaxError


class LiteralID(NamedTuple):
    """A plain team ID."""

    team_id: str

    @property
    def text(self) -> str:
        return self.team_id


class StructuredReference(NamedTuple):
    """A reference to a team by its place in a group."""

    stage_id: str
    group_id: str
    selector: str    # "league" or a match ID
    qualifier: str   # a league position, or "winner"/"loser"

    @property
    def group_key(self) -> str:
        return f"{self.stage_id}:{self.group_id}"

    @property
    def text(self) -> str:
        return f"{{{self.stage_id}:{self.group_id}:{self.selector}:{self.qualifier}}}"


Operand = Union[LiteralID, StructuredReference]


class TernaryReference(NamedTuple):
    """Picks if_true when left and right resolve to the same team, otherwise if_false."""

    left: Operand
    right: Operand
    if_true: Operand
    if_false: Operand

    @property
    def text(self) -> str:
        return f"{self.left.text}=={self.right.text}?{self.if_true.text}:{self.if_false.text}"


TeamReference = Union[LiteralID, StructuredReference, TernaryReference]


def is_reference(team_id: str) -> bool:
    """Whether a team ID is a reference rather than a literal ID."""
    return team_id.startswith("{")


def parse_team_reference(text: str) -> TeamReference:
    """
    Parse a team ID or team reference.

    Args:
        text: The ID or reference as written in a match

    Returns:
        A LiteralID, StructuredReference or TernaryReference

    Raises:
        ReferenceSyntaxError: If the text is not a well-formed reference
    """
    if not is_reference(text):
        if not text:
            raise ReferenceSyntaxError("Invalid team ID: must not be empty", fragment=text)
        return LiteralID(text)

    if "==" in text:
        return _parse_ternary(text)
    return _parse_structured(text)


def _parse_ternary(text: str) -> TernaryReference:
    left_text, _, rest = text.partition("==")
    right_text, separator, branches = rest.partition("?")
    if not separator:
        raise ReferenceSyntaxError(f'Invalid ternary reference, missing "?": "{text}"', fragment=text)

    # The true branch may itself contain ":" when it is a structured reference
    if branches.startswith("{"):
        close = branches.find("}")
        if close == -1:
            raise ReferenceSyntaxError(
                f'Invalid ternary true team reference: "{branches}"', fragment=branches, part="true team"
            )
        true_text = branches[:close + 1]
        remainder = branches[close + 1:]
        if not remainder.startswith(":"):
            raise ReferenceSyntaxError(
                f'Invalid ternary reference, missing ":" after the true team: "{text}"', fragment=text
            )
        false_text = remainder[1:]
    else:
        true_text, separator, false_text = branches.partition(":")
        if not separator:
            raise ReferenceSyntaxError(f'Invalid ternary reference, missing ":": "{text}"', fragment=text)

    return TernaryReference(
        left=_parse_operand(left_text, "left part"),
        right=_parse_operand(right_text, "right part"),
        if_true=_parse_operand(true_text, "true team"),
        if_false=_parse_operand(false_text, "false team"),
    )


def _parse_operand(text: str, part: str) -> Operand:
    if not text:
        raise ReferenceSyntaxError(f'Invalid ternary {part} reference: "{text}"', fragment=text, part=part)
    if is_reference(text):
        return _parse_structured(text, part)
    return LiteralID(text)


def _parse_structured(text: str, part: Optional[str] = None) -> StructuredReference:
    label = f"ternary {part} reference" if part else "team reference"
    if "}" not in text:
        raise ReferenceSyntaxError(f'Invalid {label}, missing "}}": "{text}"', fragment=text, part=part)
    if not text.endswith("}") or text.count("{") != 1 or text.count("}") != 1:
        raise ReferenceSyntaxError(f'Invalid {label}: "{text}"', fragment=text, part=part)

    fields = text[1:-1].split(":")
    if len(fields) != 4:
        raise ReferenceSyntaxError(
            f'Invalid team reference format "{text}", must be "{{STAGE-ID:GROUP-ID:TYPE-INDICATOR:ENTITY-INDICATOR}}"',
            fragment=text,
            part=part,
        )
    return StructuredReference(*fields)


def structured_references(reference: TeamReference) -> list[StructuredReference]:
    """List the structured references within a parsed reference, in order."""
    if isinstance(reference, StructuredReference):
        return [reference]
    if isinstance(reference, TernaryReference):
        return [
            operand for operand in (reference.left, reference.right, reference.if_true, reference.if_false)
            if isinstance(operand, StructuredReference)
        ]
    return []
