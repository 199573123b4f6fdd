"""
Property-based tests for Event Logger module.

Uses Hypothesis for property-based testing to verify dual-format output,
level filtering and error context logging.
"""

import json
from io import StringIO

import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

from address_metadata.enums import LogLevel
from address_metadata.event_logger import LEVEL_ORDER, EventLogger


# Strategies for generating valid test data

@st.composite
def log_level_strategy(draw) -> LogLevel:
    """Generate valid LogLevel values."""
    return draw(st.sampled_from(list(LogLevel)))


@st.composite
def component_name_strategy(draw) -> str:
    """Generate valid component names."""
    return draw(st.text(
        alphabet=st.sampled_from("abcdefghijklmnopqrstuvwxyz_"),
        min_size=1,
        max_size=30,
    ))


@st.composite
def message_strategy(draw) -> str:
    """Generate valid log messages."""
    return draw(st.text(
        alphabet=st.characters(
            whitelist_categories=('L', 'N', 'P', 'S', 'Zs'),
            blacklist_characters='\x00\n\r',
        ),
        min_size=1,
        max_size=200,
    ))


@st.composite
def data_strategy(draw) -> dict:
    """Generate data dictionaries with simple JSON-serializable values."""
    return draw(st.dictionaries(
        st.text(alphabet=st.sampled_from("abcdefghijklmnopqrstuvwxyz_"), min_size=1, max_size=15),
        st.one_of(
            st.text(max_size=30),
            st.integers(min_value=-1000, max_value=1000),
            st.booleans(),
            st.none(),
        ),
        max_size=5,
    ))


def output_lines(output: StringIO) -> list[str]:
    return [line for line in output.getvalue().split("\n") if line]


class TestDualFormatLoggingProperty:
    """
    Property: Log entries in dual format.

    *For any* log entry when output_format is "both", the logger SHALL
    produce a valid JSON line followed by a human-readable text line.
    """

    @given(
        level=log_level_strategy(),
        component=component_name_strategy(),
        message=message_strategy(),
        data=data_strategy(),
    )
    @settings(max_examples=100)
    def test_dual_format_produces_both_outputs(
        self,
        level: LogLevel,
        component: str,
        message: str,
        data: dict,
    ) -> None:
        output = StringIO()
        logger = EventLogger(output_format="both", output_stream=output)

        entry = logger.log(level, component, message, data)

        lines = output_lines(output)
        assert len(lines) == 2, f"Expected 2 lines, got {len(lines)}"

        parsed = json.loads(lines[0])
        assert parsed["level"] == level.value
        assert parsed["component"] == component
        assert parsed["message"] == message
        assert parsed["data"] == data
        assert parsed["timestamp"] == entry.timestamp

        assert level.value.upper() in lines[1]
        assert f"[{component}]" in lines[1]
        assert message in lines[1]

    @given(
        level=log_level_strategy(),
        component=component_name_strategy(),
        message=message_strategy(),
    )
    @settings(max_examples=100)
    def test_single_formats(self, level: LogLevel, component: str, message: str) -> None:
        json_output = StringIO()
        text_output = StringIO()

        EventLogger(output_format="json", output_stream=json_output).log(level, component, message)
        text_entry = EventLogger(output_format="text", output_stream=text_output).log(level, component, message)

        json_lines = output_lines(json_output)
        text_lines = output_lines(text_output)
        assert len(json_lines) == 1
        assert json.loads(json_lines[0])["message"] == message
        assert len(text_lines) == 1
        assert text_lines[0].startswith(f"[{text_entry.timestamp}] ")

    def test_output_helpers_match_stream(self) -> None:
        output = StringIO()
        logger = EventLogger(output_format="both", output_stream=output)

        entry = logger.info("retriever", "Downloading", {"key": "data/CH"})

        assert output.getvalue() == (
            logger.get_json_output(entry) + "\n" + logger.get_text_output(entry) + "\n"
        )

    def test_invalid_output_format(self) -> None:
        with pytest.raises(ValueError):
            EventLogger(output_format="xml")


class TestLevelFilterProperty:
    """
    Property: Entries below the minimum level are dropped.
    """

    @given(min_level=log_level_strategy(), level=log_level_strategy())
    @settings(max_examples=100)
    def test_min_level(self, min_level: LogLevel, level: LogLevel) -> None:
        output = StringIO()
        logger = EventLogger(output_format="json", output_stream=output, min_level=min_level)

        entry = logger.log(level, "component", "message")

        if LEVEL_ORDER[level] >= LEVEL_ORDER[min_level]:
            assert entry is not None
            assert logger.entries == [entry]
            assert len(output_lines(output)) == 1
        else:
            assert entry is None, f"{level.value} should be dropped below {min_level.value}"
            assert logger.entries == []
            assert output.getvalue() == ""

    def test_level_helpers(self) -> None:
        logger = EventLogger(output_format="json", output_stream=StringIO())

        logger.debug("c", "d")
        logger.info("c", "i")
        logger.warn("c", "w")
        logger.log_error("c", "e")

        assert [e.level for e in logger.entries] == [
            LogLevel.DEBUG, LogLevel.INFO, LogLevel.WARN, LogLevel.ERROR,
        ]

        logger.clear_entries()
        assert logger.entries == []


class TestErrorContextLoggingProperty:
    """
    Property: Error logs include full context.

    *For any* error-level log entry, the data field SHALL contain the error
    message and type, and the request URL and response status when given.
    """

    @given(
        component=component_name_strategy(),
        message=message_strategy(),
        error_message=message_strategy(),
        status_code=st.sampled_from([400, 404, 429, 500, 502, 503]),
    )
    @settings(max_examples=100)
    def test_error_logs_include_error_context(
        self,
        component: str,
        message: str,
        error_message: str,
        status_code: int,
    ) -> None:
        logger = EventLogger(output_format="json", output_stream=StringIO())

        entry = logger.log_error(
            component=component,
            message=message,
            error=ValueError(error_message),
            request_url="https://example.com/address/data/US",
            response_status_code=status_code,
            additional_data={"key": "data/US"},
        )

        assert entry.level == LogLevel.ERROR
        assert entry.data == {
            "key": "data/US",
            "error_message": error_message,
            "error_type": "ValueError",
            "request_url": "https://example.com/address/data/US",
            "response_status_code": status_code,
        }

    @given(component=component_name_strategy(), message=message_strategy())
    @settings(max_examples=100)
    def test_error_logs_with_minimal_context(self, component: str, message: str) -> None:
        logger = EventLogger(output_format="json", output_stream=StringIO())

        entry = logger.log_error(component=component, message=message)

        assert entry.level == LogLevel.ERROR
        assert entry.data == {}

    def test_additional_data_is_not_modified(self) -> None:
        logger = EventLogger(output_format="json", output_stream=StringIO())
        additional_data = {"key": "data/US"}

        logger.log_error("c", "m", error=RuntimeError("boom"), additional_data=additional_data)

        assert additional_data == {"key": "data/US"}
