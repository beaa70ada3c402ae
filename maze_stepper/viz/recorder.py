import logging
import os
from datetime import datetime
from typing import List, Optional, Tuple

import cv2
import numpy as np
import pygame

logger = logging.getLogger(__name__)

RECORDINGS_DIR = "recordings"


def default_output_file(prefix: str) -> str:
    """recordings/<prefix>_<timestamp>.mp4, creating the directory if needed."""
    os.makedirs(RECORDINGS_DIR, exist_ok=True)
    ts = datetime.now().strftime("%Y%m%d_%H%M%S")
    return os.path.join(RECORDINGS_DIR, f"{prefix}_{ts}.mp4")


def segment_file(output_file: str, segment: int) -> str:
    """
    File for the nth segment of one recording. The first segment keeps the
    requested name; later ones get a `_partN` suffix.
    """
    if segment == 0:
        return output_file
    base, ext = os.path.splitext(output_file)
    return f"{base}_part{segment + 1}{ext}"


class VideoRecorder:
    """
    Writes the rendered frames to mp4.

    A cv2 writer drops frames whose size differs from the one it was opened
    with, so a window resize (regenerating at a new size) closes the current
    file and continues in a new segment.
    """
    def __init__(self, active=False, output_file=None, fps=30):
        self.active = active
        self.output_file = output_file
        self.fps = fps
        self.writer = None
        self.frame_size: Optional[Tuple[int, int]] = None
        self.frame_count = 0
        self.segment_frames = 0
        # Every file written so far, in order
        self.files: List[str] = []

        if self.active and not self.output_file:
            self.output_file = default_output_file("maze")

    def open_segment(self, size: Tuple[int, int]):
        path = segment_file(self.output_file, len(self.files))
        fourcc = cv2.VideoWriter_fourcc(*'mp4v')
        self.writer = cv2.VideoWriter(path, fourcc, self.fps, size)
        self.frame_size = size
        self.segment_frames = 0
        self.files.append(path)
        logger.info(f"Recording started: {path} ({size[0]}x{size[1]})")

    def close_segment(self):
        if self.writer is None:
            return
        self.writer.release()
        self.writer = None
        logger.info(f"Video saved: {self.files[-1]} ({self.segment_frames} frames)")

    def capture_frame(self, surface: pygame.Surface):
        if not self.active:
            return

        size = surface.get_size()
        if self.writer is not None and size != self.frame_size:
            logger.info(f"Window resized from {self.frame_size} to {size}; starting a new segment")
            self.close_segment()
        if self.writer is None:
            self.open_segment(size)

        # surfarray is (width, height, 3) RGB; the writer wants (height, width, 3) BGR
        frame = np.ascontiguousarray(np.transpose(pygame.surfarray.array3d(surface), (1, 0, 2)))
        self.writer.write(cv2.cvtColor(frame, cv2.COLOR_RGB2BGR))
        self.segment_frames += 1
        self.frame_count += 1

    def stop(self):
        self.close_segment()
        if self.files:
            logger.info(f"Recording finished: {self.frame_count} frames in {len(self.files)} file(s)")
