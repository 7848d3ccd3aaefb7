"""Integration tests for the stdio channel adapter.

Tests the stdio adapter with a real plugin attached, verifying:
- JSON line parsing from stdin
- Result serialization to stdout
- UTF-8 encoding and newline handling
- BOM stripping
- Cross-platform line endings
"""

import io
import json

import pytest

from selfie_camera.platform_info import PlatformInfo
from selfie_camera.plugin import SelfieCameraPlugin
from selfie_camera.protocol import Result
from selfie_camera.transport.stdio_adapter import StdioChannelAdapter

# =============================================================================
# Helpers
# =============================================================================


def make_binary_stream(lines: list[str], newline: str = "\n") -> io.BytesIO:
    """Create a binary stream from lines (simulating stdin)."""
    content = newline.join(lines) + newline
    return io.BytesIO(content.encode("utf-8"))


def read_results_from_stream(stream: io.BytesIO) -> list[dict]:
    """Read JSON results from a binary stream (simulating stdout)."""
    stream.seek(0)
    results = []
    for line in stream:
        line_str = line.decode("utf-8").strip()
        if line_str:
            results.append(json.loads(line_str))
    return results


async def run_lines(
    lines: list[str], newline: str = "\n", handlers: dict | None = None
) -> tuple[list[dict], str]:
    """Run the adapter with an attached plugin over the given input lines."""
    stdout = io.BytesIO()
    stderr = io.BytesIO()
    adapter = StdioChannelAdapter(
        stdin=make_binary_stream(lines, newline), stdout=stdout, stderr=stderr
    )
    plugin = SelfieCameraPlugin(platform_info=PlatformInfo("iOS", "17.0"), handlers=handlers)
    plugin.attach(adapter)
    try:
        await adapter.run()
    finally:
        plugin.detach()
    return read_results_from_stream(stdout), stderr.getvalue().decode("utf-8")


# =============================================================================
# Tests: Basic Command Processing
# =============================================================================


class TestBasicCommands:
    """Test basic command processing through stdio."""

    @pytest.mark.anyio
    async def test_get_platform_version(self):
        results, _ = await run_lines(['{"id": "c1", "name": "getPlatformVersion"}'])

        assert len(results) == 1
        assert results[0]["type"] == "success"
        assert results[0]["value"] == "iOS 17.0"
        assert results[0]["correlation_id"] == "c1"

    @pytest.mark.anyio
    async def test_explicit_channel(self):
        results, _ = await run_lines(
            ['{"id": "c1", "channel": "selfie_camera", "name": "getPlatformVersion"}']
        )

        assert results[0]["value"] == "iOS 17.0"

    @pytest.mark.anyio
    async def test_unknown_command_not_implemented(self):
        results, _ = await run_lines(['{"id": "c1", "name": "takeSelfie"}'])

        assert results[0]["type"] == "not_implemented"
        assert results[0]["correlation_id"] == "c1"

    @pytest.mark.anyio
    async def test_one_result_per_command(self):
        results, _ = await run_lines(
            [
                '{"id": "c1", "name": "getPlatformVersion"}',
                '{"id": "c2", "name": "takeSelfie"}',
                '{"id": "c3", "name": "getPlatformVersion", "arguments": {"ignored": true}}',
            ]
        )

        assert [r["correlation_id"] for r in results] == ["c1", "c2", "c3"]
        assert [r["type"] for r in results] == ["success", "not_implemented", "success"]

    @pytest.mark.anyio
    async def test_unattached_channel(self):
        results, _ = await run_lines(['{"id": "c1", "channel": "other", "name": "x"}'])

        assert results[0]["type"] == "error"
        assert results[0]["code"] == "NOT_ATTACHED"


# =============================================================================
# Tests: Error Handling
# =============================================================================


class TestErrorHandling:
    """Test error handling in stdio adapter."""

    @pytest.mark.anyio
    async def test_invalid_json(self):
        results, stderr = await run_lines(["not valid json"])

        assert results[0]["type"] == "error"
        assert results[0]["code"] == "PARSE_ERROR"
        assert results[0]["correlation_id"] is None
        assert "Parse error" in stderr

    @pytest.mark.anyio
    async def test_non_object_json(self):
        results, _ = await run_lines(["[1, 2, 3]"])

        assert results[0]["code"] == "PARSE_ERROR"

    @pytest.mark.anyio
    async def test_missing_name(self):
        results, _ = await run_lines(['{"id": "c1"}'])

        assert results[0]["code"] == "PARSE_ERROR"

    @pytest.mark.anyio
    async def test_processing_continues_after_parse_error(self):
        results, _ = await run_lines(
            ["{broken", '{"id": "c2", "name": "getPlatformVersion"}']
        )

        assert results[0]["code"] == "PARSE_ERROR"
        assert results[1]["type"] == "success"

    @pytest.mark.anyio
    @pytest.mark.parametrize("channel", ['["x"]', "42", "{}", "true"])
    async def test_non_string_channel_is_parse_error(self, channel):
        results, stderr = await run_lines(
            [
                f'{{"id": "c1", "channel": {channel}, "name": "getPlatformVersion"}}',
                '{"id": "c2", "name": "getPlatformVersion"}',
            ]
        )

        assert len(results) == 2
        assert results[0]["code"] == "PARSE_ERROR"
        assert results[1]["type"] == "success"
        assert results[1]["correlation_id"] == "c2"
        assert "Fatal error" not in stderr

    @pytest.mark.anyio
    async def test_unserializable_handler_value_still_answers(self):
        results, _ = await run_lines(
            [
                '{"id": "c1", "name": "snapshot"}',
                '{"id": "c2", "name": "getPlatformVersion"}',
            ],
            handlers={"snapshot": lambda arguments: object()},
        )

        assert len(results) == 2
        assert results[0]["type"] == "error"
        assert results[0]["code"] == "HANDLER_ERROR"
        assert results[0]["correlation_id"] == "c1"
        assert results[1]["value"] == "iOS 17.0"

    def test_unencodable_result_is_replaced_by_error_line(self):
        stdout = io.BytesIO()
        stderr = io.BytesIO()
        adapter = StdioChannelAdapter(stdin=io.BytesIO(), stdout=stdout, stderr=stderr)

        adapter._send_result(Result.success("c9", object()))

        results = read_results_from_stream(stdout)
        assert len(results) == 1
        assert results[0]["code"] == "HANDLER_ERROR"
        assert results[0]["correlation_id"] == "c9"
        assert "Failed to encode result" in stderr.getvalue().decode("utf-8")

    @pytest.mark.anyio
    async def test_empty_lines_ignored(self):
        results, _ = await run_lines(["", '{"name": "getPlatformVersion"}', "", ""])

        assert len(results) == 1


# =============================================================================
# Tests: Encoding
# =============================================================================


class TestEncoding:
    """Test UTF-8 and newline handling."""

    @pytest.mark.anyio
    async def test_crlf_input(self):
        results, _ = await run_lines(
            ['{"id": "c1", "name": "getPlatformVersion"}', '{"id": "c2", "name": "x"}'],
            newline="\r\n",
        )

        assert [r["correlation_id"] for r in results] == ["c1", "c2"]

    @pytest.mark.anyio
    async def test_bom_stripped(self):
        results, _ = await run_lines(['\ufeff{"id": "c1", "name": "getPlatformVersion"}'])

        assert results[0]["type"] == "success"

    @pytest.mark.anyio
    async def test_bom_only_line_ignored(self):
        results, stderr = await run_lines(
            ["\ufeff", " \ufeff ", '{"id": "c1", "name": "getPlatformVersion"}']
        )

        assert len(results) == 1
        assert results[0]["correlation_id"] == "c1"
        assert "Parse error" not in stderr

    @pytest.mark.anyio
    async def test_unicode_round_trip(self):
        results, _ = await run_lines(['{"id": "ç1-日本", "name": "sélfie"}'])

        assert results[0]["correlation_id"] == "ç1-日本"
        assert "sélfie" in results[0]["error"]

    @pytest.mark.anyio
    async def test_output_uses_lf(self):
        stdout = io.BytesIO()
        adapter = StdioChannelAdapter(
            stdin=make_binary_stream(['{"name": "x"}', '{"name": "y"}'], "\r\n"),
            stdout=stdout,
            stderr=io.BytesIO(),
        )
        await adapter.run()

        raw = stdout.getvalue()
        assert b"\r\n" not in raw
        assert raw.count(b"\n") == 2
