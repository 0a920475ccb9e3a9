"""Tests for dynamic window sizing."""

from __future__ import annotations

import pytest

from promptfit.context import ContextConfig, WindowSize, compute_window_size
from promptfit.context.sizing import round_up
from promptfit.errors import ConfigurationError


class TestComputeWindowSize:
    """Tests for compute_window_size."""

    @pytest.mark.parametrize(
        ("message_length", "response_budget", "model_max_ctx", "expected"),
        [
            # short prompt, remaining room: 1 + 8191 = 8192
            (1, -1, 8192, 8192),
            # 11 + 512 = 523, rounded up
            (11, 512, 8192, 1024),
            # 1 + 100 = 101, rounded up
            (1, 100, 8192, 1024),
            (2, -1, 8192, 8192),
            (6, 256, 4096, 1024),
            (1, -1, 4096, 4096),
            # 1000 + 100 crosses one quantum
            (1000, 100, 8192, 2048),
        ],
    )
    def test_window_sizes(
        self, message_length: int, response_budget: int, model_max_ctx: int, expected: int
    ) -> None:
        """Test window sizes for typical requests."""
        window = compute_window_size(message_length, response_budget, model_max_ctx)

        assert window.tokens == expected
        assert not window.budget_exceeded

    def test_caller_window_ignored_by_default(self) -> None:
        """Test a caller-supplied window does not change the result."""
        window = compute_window_size(1, 100, 8192, requested_window=4096)

        assert window.tokens == 1024

    def test_caller_window_as_upper_bound(self) -> None:
        """Test the upper_bound policy caps the window with the caller value."""
        config = ContextConfig(caller_window_policy="upper_bound")

        window = compute_window_size(100, -1, 8192, config=config, requested_window=2000)

        assert window.tokens == 2048

    def test_caller_window_upper_bound_respects_floor(self) -> None:
        """Test a tiny caller window is still clamped to the floor."""
        config = ContextConfig(caller_window_policy="upper_bound")

        window = compute_window_size(10, -1, 8192, config=config, requested_window=16)

        assert window.tokens == 1024

    def test_zero_response_budget_means_unspecified(self) -> None:
        """Test a zero budget falls back to the remaining room."""
        assert compute_window_size(10, 0, 4096).tokens == 4096

    def test_response_floor_when_prompt_nearly_fills_model(self) -> None:
        """Test the default budget never drops below the floor."""
        window = compute_window_size(8000, -1, 8192)

        assert window.response_budget == 1024
        assert window.tokens == 8192

    def test_prompt_reaching_model_limit(self) -> None:
        """Test an oversized prompt gets the cap and is flagged, not rejected."""
        window = compute_window_size(9000, -1, 8192)

        assert window.tokens == 8192
        assert window.budget_exceeded

    def test_prompt_exactly_at_model_limit(self) -> None:
        """Test a prompt equal to the model limit is flagged."""
        window = compute_window_size(8192, 100, 8192)

        assert window.tokens == 8192
        assert window.budget_exceeded

    def test_custom_floor_and_quantum(self) -> None:
        """Test config values drive rounding and clamping."""
        config = ContextConfig(quantum=512, window_floor=2048)

        assert compute_window_size(1, 100, 8192, config=config).tokens == 2048
        assert compute_window_size(2100, 100, 8192, config=config).tokens == 2560

    def test_model_smaller_than_floor(self) -> None:
        """Test the model limit wins over the floor."""
        assert compute_window_size(10, 100, 512).tokens == 512

    def test_model_limit_not_a_quantum_multiple(self) -> None:
        """Test the window stops at the largest multiple the model can hold."""
        window = compute_window_size(100, -1, 5000)

        assert window.tokens == 4096
        assert not window.budget_exceeded

    def test_prompt_over_non_multiple_limit(self) -> None:
        """Test an oversized prompt still gets the full model limit."""
        window = compute_window_size(5000, -1, 5000)

        assert window.tokens == 5000
        assert window.budget_exceeded

    def test_arguments_required(self) -> None:
        """Test the model limit has no default."""
        with pytest.raises(TypeError):
            compute_window_size(10, 100)  # type: ignore[call-arg]

    def test_window_size_converts_to_int(self) -> None:
        """Test a WindowSize can be used wherever an int budget is expected."""
        window = compute_window_size(11, 512, 8192)

        assert isinstance(window, WindowSize)
        assert int(window) == 1024

    def test_invalid_model_limit(self) -> None:
        """Test a non-positive model limit is a configuration error."""
        with pytest.raises(ConfigurationError) as exc_info:
            compute_window_size(10, 100, 0)

        assert exc_info.value.config_key == "model_max_ctx"

    def test_negative_message_length(self) -> None:
        """Test a negative message length is a configuration error."""
        with pytest.raises(ConfigurationError):
            compute_window_size(-1, 100, 8192)


class TestWindowProperties:
    """Properties that hold across many inputs."""

    @pytest.mark.parametrize("response_budget", [-1, 1, 100, 512, 3000])
    def test_multiple_of_quantum_within_bounds(self, response_budget: int) -> None:
        """Test every window is a positive multiple of 1024 within bounds."""
        for message_length in range(0, 10000, 37):
            window = compute_window_size(message_length, response_budget, 8192).tokens

            assert window % 1024 == 0
            assert 1024 <= window <= 8192

    @pytest.mark.parametrize("response_budget", [-1, 1, 100, 3000])
    def test_non_multiple_model_limit(self, response_budget: int) -> None:
        """Test a 5000-token model still gets quantum-sized windows."""
        for message_length in range(0, 5000, 37):
            window = compute_window_size(message_length, response_budget, 5000).tokens

            assert window % 1024 == 0
            assert 1024 <= window <= 4096

    @pytest.mark.parametrize("response_budget", [1, 100, 512, 3000])
    def test_non_decreasing_in_message_length(self, response_budget: int) -> None:
        """Test longer prompts never get smaller windows."""
        previous = 0
        for message_length in range(0, 10000, 13):
            window = compute_window_size(message_length, response_budget, 16384).tokens

            assert window >= previous
            previous = window


class TestRoundUp:
    """Tests for round_up."""

    def test_round_up(self) -> None:
        """Test rounding to the next multiple."""
        assert round_up(1, 1024) == 1024
        assert round_up(1024, 1024) == 1024
        assert round_up(1025, 1024) == 2048
        assert round_up(0, 1024) == 0
