import logging

import pygame

from maze_stepper.core.direction import Direction
from maze_stepper.core.errors import MazeInvariantError
from maze_stepper.core.grid import Grid
from maze_stepper.session import MazeSession, Phase

logger = logging.getLogger(__name__)

# Number of pixels in each cell dimension
CELL_PIXELS = 20
HUD_HEIGHT = 48


class Renderer:
    COLOR_BG = (255, 255, 255)
    COLOR_WALL = (0, 0, 0)
    COLOR_FROM_TO = (255, 0, 0)
    COLOR_SEARCH = (255, 191, 127)  # orange at half strength over white
    COLOR_RESULT = (255, 0, 0)
    COLOR_HUD = (40, 40, 40)

    WALL_WIDTH = 2
    SEARCH_WIDTH = 2
    RESULT_WIDTH = 4

    def __init__(self, session: MazeSession, cell_size: int = CELL_PIXELS,
                 steps_per_frame: int = 1, fps: int = 60, record=False):
        self.session = session
        self.cell_size = cell_size
        self.steps_per_frame = max(1, steps_per_frame)
        self.fps = fps

        from maze_stepper.viz.recorder import VideoRecorder, default_output_file
        output = default_output_file(f"maze_{session.generator_name}_{session.solver_name}") if record else None
        self.recorder = VideoRecorder(active=record, output_file=output, fps=fps)

        self.font = None
        self.running = True
        self.clock = None
        self.surface = None
        self.dirty = True

    def window_size(self):
        grid = self.session.grid
        return grid.width * self.cell_size, grid.height * self.cell_size + HUD_HEIGHT

    def init_window(self):
        pygame.init()
        pygame.display.set_caption("Maze Stepper")
        self.surface = pygame.display.set_mode(self.window_size())
        self.clock = pygame.time.Clock()
        self.font = pygame.font.SysFont("Consolas", 14)

    def handle_input(self):
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                self.running = False

            elif event.type == pygame.KEYDOWN:
                if event.key == pygame.K_ESCAPE:
                    self.running = False
                elif event.key == pygame.K_g:
                    self.session.generate()
                    self.surface = pygame.display.set_mode(self.window_size())
                    self.dirty = True
                elif event.key in (pygame.K_s, pygame.K_n) and self.session.has_maze:
                    self.session.solve(new_locations=event.key == pygame.K_n)
                    self.dirty = True

    def cell_origin(self, idx: int):
        x, y = self.session.grid.coords(idx)
        return x * self.cell_size, y * self.cell_size

    def cell_center(self, idx: int):
        px, py = self.cell_origin(idx)
        half = self.cell_size // 2
        return px + half, py + half

    def draw_cell(self, grid: Grid, idx: int):
        px, py = self.cell_origin(idx)
        size = self.cell_size

        if not grid.is_tagged(idx):
            pygame.draw.rect(self.surface, self.COLOR_WALL, (px, py, size, size))
            return

        walls = (
            (Direction.NORTH, (px, py), (px + size, py)),
            (Direction.EAST, (px + size, py), (px + size, py + size)),
            (Direction.SOUTH, (px + size, py + size), (px, py + size)),
            (Direction.WEST, (px, py + size), (px, py)),
        )
        for direction, start, end in walls:
            if grid.has_wall(idx, direction):
                pygame.draw.line(self.surface, self.COLOR_WALL, start, end, self.WALL_WIDTH)

        center = self.cell_center(idx)
        if grid.is_from(idx):
            pygame.draw.circle(self.surface, self.COLOR_FROM_TO, center, int(size * 0.4))
        if grid.is_to(idx):
            pygame.draw.circle(self.surface, self.COLOR_FROM_TO, center, int(size * 0.3), max(1, int(size * 0.1)))

        prev = grid.previous_of(idx)
        if prev is not None:
            if grid.is_result(idx):
                color, width = self.COLOR_RESULT, self.RESULT_WIDTH
            else:
                color, width = self.COLOR_SEARCH, self.SEARCH_WIDTH
            pygame.draw.line(self.surface, color, self.cell_center(prev), center, width)

    def draw_grid(self):
        self.surface.fill(self.COLOR_BG)
        grid = self.session.grid
        for idx in range(grid.size):
            self.draw_cell(grid, idx)

    def draw_hud(self):
        session = self.session
        top = session.grid.height * self.cell_size
        pygame.draw.rect(self.surface, self.COLOR_HUD, (0, top, self.surface.get_width(), HUD_HEIGHT))
        if session.phase is Phase.GENERATE:
            status = f"Generating: {session.generator_label}"
        elif session.phase is Phase.SOLVE:
            status = f"Solving: {session.solver_label}"
        else:
            status = f"Done: {len(session.path) - 1} moves [G]enerate [S]olve [N]ew locations"
        info = [status, f"FPS: {int(self.clock.get_fps())}  Ticks: {session.ticks}"]
        for i, text in enumerate(info):
            lbl = self.font.render(text, True, (255, 255, 255))
            self.surface.blit(lbl, (6, top + 4 + i * 20))

    def run_loop(self):
        try:
            while self.running:
                self.handle_input()

                for _ in range(self.steps_per_frame):
                    if not self.session.tick():
                        break
                    self.dirty = True

                # Complete mazes are static; only repaint after a change
                if self.dirty or self.recorder.active:
                    self.draw_grid()
                    self.draw_hud()
                    pygame.display.flip()
                    self.dirty = self.session.phase is not Phase.COMPLETE

                if self.recorder.active:
                    self.recorder.capture_frame(self.surface)

                self.clock.tick(self.fps)
        except MazeInvariantError:
            logger.exception("Maze invariant violated; regenerate the maze")
            raise
        finally:
            self.recorder.stop()
            pygame.quit()
