"""Tests for body and hand motion parsing."""

import pytest

from chuk_mcp_juggling.constants import ErrorMessages
from chuk_mcp_juggling.errors import JuggleUserError
from chuk_mcp_juggling.motion import (
    BodyMotionParser,
    BodyPosition,
    HandCoordinate,
    parse_body,
    parse_hands,
)


class TestBodyMotion:
    """Tests for body motion parsing."""

    def test_samples_and_defaults(self) -> None:
        """Missing fields default to 0 with height 100."""
        body = parse_body("(10,0,0).-.")
        assert body.jugglers == 1
        assert body.period(1) == 2
        assert body.position(1, 0, 0) == BodyPosition(angle=10, x=0, y=0, z=100)

    def test_placeholder_beat(self) -> None:
        """A '-' sample is null."""
        body = parse_body("(10,0,0).-.")
        assert body.samples(1, 1) == 1
        assert body.position(1, 1, 0) is None

    def test_empty_beat_reserves_sample(self) -> None:
        """A beat with no samples still has one null sample."""
        body = parse_body("(0).  .")
        assert body.period(1) == 2
        assert body.samples(1, 1) == 1
        assert body.position(1, 1, 0) is None

    def test_several_samples(self) -> None:
        """Samples within a beat are kept in order."""
        body = parse_body("(0,10)(90,20,5,110).")
        assert body.samples(1, 0) == 2
        assert body.position(1, 0, 1) == BodyPosition(angle=90, x=20, y=5, z=110)

    def test_out_of_range(self) -> None:
        """Beats and samples past the end give None."""
        body = parse_body("(0).")
        assert body.samples(1, 5) == 0
        assert body.position(1, 5, 0) is None
        assert body.position(1, 0, 3) is None

    def test_jugglers_wrap(self) -> None:
        """Juggler numbers wrap modulo the number of sections."""
        body = parse_body("<(90,-100).|(270,100).>")
        assert body.jugglers == 2
        assert body.position(2, 0, 0).angle == 270
        assert body.position(3, 0, 0).angle == 90

    def test_single_section_applies_to_all(self) -> None:
        """One section covers every juggler."""
        body = parse_body("(45).")
        assert body.position(4, 0, 0).angle == 45

    def test_repeats_expanded(self) -> None:
        """'(stuff)^n' repeats before parsing."""
        body = parse_body("((0).)^3")
        assert body.period(1) == 3

    def test_brackets_ignored(self) -> None:
        """Angle and curly brackets are ignored."""
        assert parse_body("{(0).}").period(1) == 1

    def test_bang_separates_jugglers(self) -> None:
        """'!' separates sections like '|'."""
        assert parse_body("(0).!(180).").jugglers == 2

    def test_to_dict(self) -> None:
        """Body paths serialize with null samples."""
        data = BodyMotionParser().parse("(10).-.").to_dict()
        assert data["periods"] == [2]
        assert data["beats"][0][1] == [None]
        assert data["beats"][0][0][0]["z"] == 100

    def test_no_paren(self) -> None:
        """An unterminated sample reports its column."""
        with pytest.raises(JuggleUserError) as exc_info:
            parse_body("(0")
        assert exc_info.value.message == ErrorMessages.BODY_NO_PAREN
        assert exc_info.value.column == 1

    def test_bad_character(self) -> None:
        """Unexpected characters are named."""
        with pytest.raises(JuggleUserError, match="unexpected character 'x'"):
            parse_body("(0).x.")

    @pytest.mark.parametrize("text", ["(1,2,3,4,5).", "(a).", "(inf)."])
    def test_bad_coordinate(self, text: str) -> None:
        """Too many fields or non-finite numbers are rejected."""
        with pytest.raises(JuggleUserError, match="bad coordinate"):
            parse_body(text)

    @pytest.mark.parametrize("text", ["(0)", "(0).(1)", "", "(0).|"])
    def test_bad_ending(self, text: str) -> None:
        """Every beat must end with '.' and every section needs a beat."""
        with pytest.raises(JuggleUserError) as exc_info:
            parse_body(text)
        assert exc_info.value.message == ErrorMessages.BODY_BAD_ENDING


class TestHandMotion:
    """Tests for hand motion parsing."""

    def test_basic(self) -> None:
        """Two beats with throw and catch coordinates."""
        hands = parse_hands("(10)(32.5).(-10)(-32.5).")
        assert hands.period(1) == 2
        assert hands.coordinate(1, 0, 0) == HandCoordinate(x=10, y=0, z=0)
        assert hands.coordinate(1, 1, 1) == HandCoordinate(x=-32.5, y=0, z=0)
        assert hands.catch_index(1, 0) == 1

    def test_height_is_second(self) -> None:
        """Coordinates are written (x, z, y)."""
        hands = parse_hands("(10,20,30)(0).")
        assert hands.coordinate(1, 0, 0) == HandCoordinate(x=10, y=30, z=20)

    def test_throw_and_catch_markers(self) -> None:
        """'C' marks the catch coordinate; '-' is a placeholder."""
        hands = parse_hands("T(0)-C(20)(30).")
        assert hands.coordinate_count(1, 0) == 4
        assert hands.catch_index(1, 0) == 2
        assert hands.coordinate(1, 0, 1) is None
        assert hands.coordinate(1, 0, 2).x == 20

    def test_trailing_catch_clamped(self) -> None:
        """A 'C' after the last coordinate means the last coordinate."""
        hands = parse_hands("(0)(1)C.")
        assert hands.catch_index(1, 0) == 1

    def test_out_of_range(self) -> None:
        """Coordinates past the end give None."""
        hands = parse_hands("(0)(1).")
        assert hands.coordinate(1, 3, 0) is None
        assert hands.coordinate(1, 0, 2) is None

    def test_jugglers(self) -> None:
        """Sections split on '|'."""
        hands = parse_hands("<(0)(1).|(2)(3).(4)(5).>")
        assert hands.jugglers == 2
        assert hands.period(2) == 2
        assert hands.period(3) == 1

    def test_to_dict(self) -> None:
        """Hand paths serialize per beat."""
        data = parse_hands("(0)-(2).").to_dict()
        assert data["beats"][0][0]["coordinates"][1] is None
        assert data["beats"][0][0]["catch_index"] == 2

    @pytest.mark.parametrize(
        "text,message",
        [
            ("(0)T(1).", ErrorMessages.HANDS_T_NOT_START),
            ("TT(0)(1).", ErrorMessages.HANDS_TOO_MANY_THROWS),
            ("C(0)(1).", ErrorMessages.HANDS_C_AT_START),
            ("(0)C(1)C(2).", ErrorMessages.HANDS_TOO_MANY_CATCHES),
            ("(0).", ErrorMessages.HANDS_TOO_FEW_COORDS),
            ("", ErrorMessages.HANDS_TOO_FEW_COORDS),
            ("-(0).", ErrorMessages.HANDS_NO_THROW),
            ("(0)C-(1).", ErrorMessages.HANDS_NO_CATCH),
            ("(0)(1.", ErrorMessages.HANDS_NO_PAREN),
            ("(0)x(1).", ErrorMessages.HANDS_CHARACTER.format(char="x")),
            ("(1,2,3,4)(0).", ErrorMessages.HANDS_COORDINATE.format(text="1,2,3,4")),
            ("(a)(0).", ErrorMessages.HANDS_COORDINATE.format(text="a")),
        ],
    )
    def test_errors(self, text: str, message: str) -> None:
        """Malformed beats are rejected with a specific message."""
        with pytest.raises(JuggleUserError) as exc_info:
            parse_hands(text)
        assert exc_info.value.message == message
