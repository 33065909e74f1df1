"""
Interactive window for the digital rain.

Usage:
    digitalrain [options]

Controls:
    click      spawn a shockwave
    a / A      toggle audio reactivity
    Esc        quit
"""

import argparse
import sys

import pygame

from digitalrain.audio import AudioAnalyzer, AudioUnavailableError, open_microphone
from digitalrain.canvas import PygameCanvas
from digitalrain.cli import add_config_arguments, config_from_args, fit_alphabet
from digitalrain.config import RainConfig
from digitalrain.engine import RainEngine

WINDOW_FLAGS = pygame.RESIZABLE


def open_audio(cfg: RainConfig) -> AudioAnalyzer:
    """Attach the microphone if possible; otherwise run without audio."""
    try:
        source = open_microphone(cfg)
    except AudioUnavailableError as e:
        print(f"Warning: {e}. Audio reactivity disabled.", file=sys.stderr)
        cfg.enable_audio_reactivity = False
        return AudioAnalyzer(cfg)
    return AudioAnalyzer(cfg, source)


def handle_event(event: pygame.event.Event, engine: RainEngine, canvas: PygameCanvas) -> bool:
    """Route one pygame event. Returns False when the window should close."""
    if event.type == pygame.QUIT:
        return False
    if event.type == pygame.KEYDOWN:
        if event.key == pygame.K_ESCAPE:
            return False
        if event.unicode in ("a", "A"):
            enabled = engine.toggle_audio()
            print("Audio reactivity:", "enabled" if enabled else "disabled", flush=True)
    elif event.type == pygame.MOUSEBUTTONDOWN:
        x, y = event.pos
        engine.handle_click(x, y)
    elif event.type == pygame.VIDEORESIZE:
        canvas.resize(event.w, event.h)
        engine.resize(event.w, event.h)
    return True


def run(cfg: RainConfig, seed: int | None = None):
    pygame.init()
    try:
        screen = pygame.display.set_mode((cfg.width, cfg.height), WINDOW_FLAGS)
        pygame.display.set_caption("digitalrain")

        canvas = PygameCanvas(
            cfg.width, cfg.height,
            font_name=cfg.font_name,
            surface=screen,
            window_flags=WINDOW_FLAGS,
        )
        fit_alphabet(cfg, canvas)
        engine = RainEngine(cfg, audio=open_audio(cfg), seed=seed)

        clock = pygame.time.Clock()
        running = True
        try:
            while running:
                for event in pygame.event.get():
                    running = handle_event(event, engine, canvas) and running
                engine.step(canvas)
                pygame.display.flip()
                clock.tick(cfg.fps)
        finally:
            engine.close()
    finally:
        pygame.quit()


def main():
    parser = argparse.ArgumentParser(
        prog="digitalrain",
        description="Interactive digital rain with click shockwaves",
    )
    add_config_arguments(parser)
    args = parser.parse_args()

    cfg = config_from_args(args)
    run(cfg, seed=args.seed)


if __name__ == "__main__":
    main()
