"""Tests for falling streams and symbol coloring."""

import pytest

from digitalrain.config import ALPHABET, RainConfig
from digitalrain.core.stream import (
    Stream,
    Symbol,
    blend_factor,
    build_streams,
    symbol_color,
)


def _symbol(**kwargs) -> Symbol:
    symbol = Symbol(x=0.0, y=0.0, switch_interval=kwargs.pop("switch_interval", 5), **kwargs)
    symbol.effects.reset(18)
    return symbol


class TestStreamLayout:
    def test_one_stream_per_column(self, small_config, rng):
        streams = build_streams(small_config, rng)
        assert len(streams) == 5
        assert [s.x for s in streams] == [0, 18, 36, 54, 72]

    def test_fixed_length_and_spacing(self, small_config, rng):
        stream = Stream(0, small_config, rng)
        assert stream.total_symbols == 3
        assert [s.y for s in stream.symbols] == [0, 18, 36]
        assert all(s.value in ALPHABET for s in stream.symbols)

    def test_switch_interval_within_range(self, rng):
        cfg = RainConfig(width=180, height=100)
        for stream in build_streams(cfg, rng):
            for symbol in stream.symbols:
                assert cfg.switch_interval_min <= symbol.switch_interval <= cfg.switch_interval_max

    def test_opacity_and_gradient_rank(self, small_config, rng):
        stream = Stream(0, small_config, rng)
        assert stream.opacity_for(3) == pytest.approx(small_config.opacity_max)
        assert stream.opacity_for(0) == pytest.approx(small_config.opacity_min)
        # The last symbol is the leading (bottom-most) one
        assert stream.gradient_index(2) == 0
        assert stream.gradient_index(0) == 2


class TestRainAndWrap:
    def test_wraps_at_height(self, rng):
        symbol = _symbol()
        symbol.y = 95.0
        symbol.fall(10.0, 100, rng)
        assert symbol.y == 0.0
        assert symbol.value in ALPHABET

    def test_exact_height_wraps(self, rng):
        symbol = _symbol()
        symbol.y = 90.0
        symbol.fall(10.0, 100, rng)
        assert symbol.y == 0.0

    def test_never_observed_past_height(self, small_config, rng, canvas):
        stream = Stream(0, small_config, rng)
        for frame in range(1, 200):
            for symbol in stream.symbols:
                assert symbol.y < small_config.height
            stream.render(canvas, frame, 0.0, rng)

    def test_long_streams_start_on_surface(self, rng):
        cfg = RainConfig(enable_audio_reactivity=False)
        # Up to 50 symbols of 18 px reach past the 720 px default height
        assert cfg.max_stream_length * cfg.symbol_size > cfg.height
        streams = build_streams(cfg, rng)
        assert [s.y for st in streams for s in st.symbols if s.y >= cfg.height] == []

    def test_respects_configured_alphabet(self, small_config, rng, canvas):
        small_config.alphabet = "01"
        stream = Stream(0, small_config, rng)
        for frame in range(1, 40):
            stream.render(canvas, frame, 0.0, rng)
        assert {call[1] for call in canvas.calls} <= {"0", "1"}

    def test_flicker_on_interval(self, rng):
        symbol = _symbol(switch_interval=4, value="#")
        symbol.flicker(3, rng)
        assert symbol.value == "#"
        symbol.flicker(8, rng)
        assert symbol.value in ALPHABET


class TestBlendFactor:
    def test_leader_and_second(self):
        cfg = RainConfig(second_character_brightness=0.75)
        assert blend_factor(0, cfg) == 0.0
        assert blend_factor(1, cfg) == pytest.approx(0.25)

    def test_degenerate_gradient_length(self):
        cfg = RainConfig(leading_gradient_length=2)
        assert blend_factor(2, cfg) == 1.0
        assert blend_factor(30, cfg) == 1.0

    def test_linear_then_clamped(self):
        cfg = RainConfig(leading_gradient_length=6, second_character_brightness=0.5)
        assert blend_factor(2, cfg) == pytest.approx(0.5)
        assert blend_factor(4, cfg) == pytest.approx(0.75)
        assert blend_factor(10, cfg) == 1.0


class TestSymbolColor:
    def test_leader_uses_leading_color(self):
        cfg = RainConfig(enable_audio_reactivity=False)
        assert symbol_color(_symbol(), 0, 0.0, cfg) == tuple(float(c) for c in cfg.leading_color)

    def test_tail_uses_trailing_color(self):
        cfg = RainConfig(enable_audio_reactivity=False)
        assert symbol_color(_symbol(), 5, 0.0, cfg) == tuple(float(c) for c in cfg.trailing_color)

    def test_brightness_boost_clamped(self):
        cfg = RainConfig(enable_audio_reactivity=False, enable_brightness_effect=True)
        symbol = _symbol()
        symbol.effects.brightness = 200
        assert symbol_color(symbol, 0, 0.0, cfg) == (255.0, 255.0, 255.0)

    def test_brightness_ignored_when_disabled(self):
        cfg = RainConfig(enable_audio_reactivity=False, enable_brightness_effect=False)
        symbol = _symbol()
        symbol.effects.brightness = 200
        assert symbol_color(symbol, 5, 0.0, cfg) == (0.0, 154.0, 30.0)

    def test_full_audio_flash(self):
        cfg = RainConfig(enable_audio_reactivity=True)
        color = symbol_color(_symbol(), 5, 1.0, cfg)
        assert color == tuple(float(c) for c in cfg.audio_leading_color)

    def test_audio_below_threshold_has_no_effect(self):
        cfg = RainConfig(enable_audio_reactivity=True, audio_threshold=0.5)
        quiet = symbol_color(_symbol(), 5, 0.4, cfg)
        assert quiet == tuple(float(c) for c in cfg.trailing_color)

    def test_audio_ignored_when_disabled(self):
        cfg = RainConfig(enable_audio_reactivity=False)
        assert symbol_color(_symbol(), 5, 1.0, cfg) == tuple(float(c) for c in cfg.trailing_color)


class TestRender:
    def test_draws_every_symbol(self, small_config, rng, canvas):
        stream = Stream(0, small_config, rng)
        stream.render(canvas, 1, 0.0, rng)
        assert canvas.ops() == ["glyph"] * 3

    def test_leading_symbol_is_most_opaque(self, small_config, rng, canvas):
        stream = Stream(0, small_config, rng)
        stream.render(canvas, 1, 0.0, rng)
        alphas = [call[5][3] for call in canvas.calls]
        assert alphas == sorted(alphas)

    def test_audio_phase_cycles_and_resets(self, small_config, rng, canvas):
        small_config.enable_audio_reactivity = True
        stream = Stream(0, small_config, rng)
        for frame in range(1, 4):
            stream.render(canvas, frame, 1.0, rng)
        assert all(s.audio_effect_index == 3 for s in stream.symbols)

        for frame in range(4, 7):
            stream.render(canvas, frame, 1.0, rng)
        assert all(s.audio_effect_index == 6 % small_config.audio_effect_length for s in stream.symbols)

        stream.render(canvas, 7, 0.0, rng)
        assert all(s.audio_effect_index == 0 for s in stream.symbols)

    def test_wave_offset_moves_glyph(self, small_config, rng, canvas):
        stream = Stream(0, small_config, rng)
        stream.symbols[0].effects.wave_offset = 7.0
        stream.render(canvas, 1, 0.0, rng)
        assert canvas.calls[0][3] == pytest.approx(7.0)

    def test_wrap_out_of_bounds_after_shrink(self, small_config, rng):
        stream = Stream(0, small_config, rng)
        small_config.height = 20
        stream.wrap_out_of_bounds(rng)
        assert all(s.y < 20 for s in stream.symbols)
