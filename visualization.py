# visualization.py
"""
Handles the window, drawing and input events using Pygame.
"""
import logging
from typing import Optional, Tuple

import pygame

from constants import (
    BACKGROUND_COLOR, BLOOM_SCALE, DEFAULT_WINDOW_SIZE, GLOW_ALPHA, TITLE
)

# Forward reference for type hinting to avoid circular import
from typing import TYPE_CHECKING
if TYPE_CHECKING:
    from simulation import Simulation
    from state import SimulationState


# --- Data Contracts ---
#
# Canvas (implemented here by PygameCanvas; any object with these methods
# can be handed to Simulation.step):
#   - clear() -> None
#   - fill_circle(center: (x, y), radius: float, color, glow: float = 0) -> None
#     - glow > 0 adds a soft halo of roughly that many pixels.
#   - line(start: (x, y), end: (x, y), color, width: float) -> None
#     - Widths below 1 px are drawn as a faint 1 px line.
#   - text_width(text: str) -> int
#   - text(text: str, bottom_left: (x, y), fill, outline) -> None
#   - present() -> None
#
# class Visualizer:
#   - poll_events(self, simulation: "Simulation", state: "SimulationState") -> bool:
#     - Outputs:
#       - bool: False if the user has quit, True otherwise.
#     - Side Effects: Forwards clicks, pointer moves, wheel scrolls, resizes
#       and pause toggles to the simulation.

class PygameCanvas:
    """
    Immediate-mode drawing surface on top of a pygame display.

    Glowing circles and connection lines go to separate transparent layers,
    which are composited onto the screen in present().
    """
    def __init__(self, screen: pygame.Surface, font: pygame.font.Font):
        self.screen = screen
        self.font = font
        self._create_layers(screen.get_size())

    def _create_layers(self, size: Tuple[int, int]):
        self.glow_surface = pygame.Surface(size, pygame.SRCALPHA)
        self.line_surface = pygame.Surface(size, pygame.SRCALPHA)
        self.glow_used = False

    def resize(self, screen: pygame.Surface):
        self.screen = screen
        self._create_layers(screen.get_size())

    def clear(self):
        self.screen.fill(BACKGROUND_COLOR)
        self.glow_surface.fill((0, 0, 0, 0))
        self.line_surface.fill((0, 0, 0, 0))
        self.glow_used = False

    def fill_circle(self, center, radius: float, color, glow: float = 0):
        if glow > 0:
            halo_color = pygame.Color(color.r, color.g, color.b, GLOW_ALPHA)
            pygame.draw.circle(self.glow_surface, halo_color, center, radius + glow / 2)
            self.glow_used = True
        pygame.draw.circle(self.screen, color, center, radius)

    def line(self, start, end, color, width: float):
        color = pygame.Color(color)
        color.a = int(255 * min(width, 1.0))
        pygame.draw.line(self.line_surface, color, start, end, max(int(width), 1))

    def text_width(self, text: str) -> int:
        return self.font.size(text)[0]

    def text(self, text: str, bottom_left, fill, outline):
        outline_surf = self.font.render(text, True, outline)
        fill_surf = self.font.render(text, True, fill)
        rect = fill_surf.get_rect(bottomleft=(int(bottom_left[0]), int(bottom_left[1])))
        for dx, dy in ((-1, 0), (1, 0), (0, -1), (0, 1)):
            self.screen.blit(outline_surf, rect.move(dx, dy))
        self.screen.blit(fill_surf, rect)

    def present(self):
        self.screen.blit(self.line_surface, (0, 0))

        if self.glow_used:
            # Blur the halo layer by scaling it down and back up, then add it.
            width, height = self.screen.get_size()
            scaled_size = (max(width // BLOOM_SCALE, 1), max(height // BLOOM_SCALE, 1))
            scaled_surface = pygame.transform.smoothscale(self.glow_surface, scaled_size)
            blurred_surface = pygame.transform.smoothscale(scaled_surface, (width, height))
            self.screen.blit(blurred_surface, (0, 0), special_flags=pygame.BLEND_RGB_ADD)

        pygame.display.flip()


class Visualizer:
    """
    Owns the pygame window and turns pygame events into simulation input.
    """
    def __init__(self, vis_params: Optional[dict] = None):
        """
        Initializes Pygame and the display window.
        """
        vis_params = vis_params if vis_params is not None else {}
        pygame.init()
        pygame.font.init()

        if vis_params.get('fullscreen', False):
            display_info = pygame.display.Info()
            width, height = display_info.current_w, display_info.current_h
            screen = pygame.display.set_mode((width, height), pygame.FULLSCREEN)
        else:
            width = vis_params.get('width', DEFAULT_WINDOW_SIZE[0])
            height = vis_params.get('height', DEFAULT_WINDOW_SIZE[1])
            screen = pygame.display.set_mode((width, height), pygame.RESIZABLE)

        pygame.display.set_caption(TITLE)
        self.clock = pygame.time.Clock()

        font_name = vis_params.get('font_name', 'Verdana')
        font_size = vis_params.get('font_size', 20)
        # SysFont falls back to the default font when the name is not installed.
        font = pygame.font.SysFont(font_name, font_size)

        self.canvas = PygameCanvas(screen, font)
        self.width, self.height = width, height
        # pygame reports whole wheel notches; the simulation expects a
        # browser-style pixel delta where positive means scrolling down.
        self.wheel_delta_per_notch = vis_params.get('wheel_delta_per_notch', 100)

        logging.info(f"Visualizer initialized with Pygame display ({width}x{height}).")

    def poll_events(self, simulation: "Simulation", state: "SimulationState") -> bool:
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                logging.info("Quit event received. Shutting down visualizer.")
                return False

            if event.type == pygame.KEYDOWN:
                if event.key == pygame.K_ESCAPE:
                    logging.info("ESC key pressed. Shutting down visualizer.")
                    return False
                if event.key in (pygame.K_SPACE, pygame.K_p):
                    simulation.toggle_pause(state)

            elif event.type == pygame.MOUSEBUTTONDOWN:
                if event.button == 1: # Left mouse click
                    simulation.handle_click(state, *event.pos)

            elif event.type == pygame.MOUSEMOTION:
                simulation.handle_pointer_move(state, *event.pos)

            elif event.type == pygame.MOUSEWHEEL:
                # event.y is 1 for scroll up, -1 for scroll down
                simulation.handle_wheel(state, -event.y * self.wheel_delta_per_notch)

            elif event.type == pygame.VIDEORESIZE:
                self.width, self.height = event.w, event.h
                screen = pygame.display.set_mode((event.w, event.h), pygame.RESIZABLE)
                self.canvas.resize(screen)
                simulation.handle_resize(state, event.w, event.h)

        return True

    def close(self):
        """Shuts down Pygame."""
        pygame.font.quit()
        pygame.quit()
