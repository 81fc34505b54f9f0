"""
Plant renderer using Cairo.

Paints one growth snapshot: bark strokes, an optional highlight pass offset
up and left, then every visible entity back to front.
"""

import math
from typing import Callable, Dict, Optional

import cairo
import numpy as np

from config.render_config import PlantRenderConfig
from growth.branch import EntityKind, VisibleEntity
from growth.projector import GrowthSnapshot, SimpleBranch
from growth.species import SpeciesProfile
from .base import Renderer, quad_to_cubic
from .sprites import SpriteLibrary


class PlantRenderer(Renderer):
    def __init__(self, profile: SpeciesProfile, config: PlantRenderConfig = None,
                 sprites: Optional[SpriteLibrary] = None):
        super().__init__(config or PlantRenderConfig())
        self.profile = profile
        self.sprites = sprites or SpriteLibrary()
        self._painters: Dict[EntityKind, Callable[[cairo.Context, VisibleEntity], None]] = {
            EntityKind.LEAF: self._paint_ball,
            EntityKind.BLOSSOM: self._paint_ball,
            EntityKind.FOLIAGE: self._paint_foliage,
            EntityKind.PETAL: self._paint_petal,
            EntityKind.FRUIT: self._paint_fruit,
            EntityKind.CLUSTER: self._paint_cluster,
            EntityKind.FLOWER: self._paint_flower,
        }

    # ==================== BRANCHES ====================

    def _trace(self, ctx: cairo.Context, branch: SimpleBranch, offset: float = 0.0):
        start = (branch.start.x + offset, branch.start.y + offset)
        control = (branch.control.x + offset, branch.control.y + offset)
        end = (branch.end.x + offset, branch.end.y + offset)
        ctx.move_to(*start)
        ctx.curve_to(*quad_to_cubic(start, control, end), *end)

    def _draw_branches(self, ctx: cairo.Context, snapshot: GrowthSnapshot):
        ctx.set_line_cap(cairo.LINE_CAP_ROUND)
        ctx.set_line_join(cairo.LINE_JOIN_ROUND)

        ctx.set_source_rgb(*self.profile.bark_color)
        for branch in snapshot.branches:
            if branch.stroke_width <= 0:
                continue
            ctx.set_line_width(branch.stroke_width)
            self._trace(ctx, branch)
            ctx.stroke()

        if self.profile.highlight_color is None:
            return

        ctx.set_source_rgb(*self.profile.highlight_color)
        for branch in snapshot.branches:
            if branch.stroke_width < self.config.min_highlight_width:
                continue
            ctx.set_line_width(branch.stroke_width * self.config.highlight_width_ratio)
            self._trace(ctx, branch, self.config.highlight_offset)
            ctx.stroke()

    # ==================== ENTITIES ====================

    def _paint_ball(self, ctx: cairo.Context, e: VisibleEntity):
        x, y, r = e.center.x, e.center.y, e.size
        sr, sg, sb, sa = self.config.shadow_color
        ctx.set_source_rgba(sr, sg, sb, sa * e.opacity)
        ctx.arc(x + self.config.shadow_offset, y + self.config.shadow_offset * 2.5, r, 0, 2 * math.pi)
        ctx.fill()

        gradient = cairo.RadialGradient(x - r * 0.3, y - r * 0.3, r * 0.1, x, y, r)
        gradient.add_color_stop_rgba(0, *e.entity.highlight_color, e.opacity)
        gradient.add_color_stop_rgba(1, *e.entity.base_color, e.opacity)
        ctx.set_source(gradient)
        ctx.arc(x, y, r, 0, 2 * math.pi)
        ctx.fill()

    def _paint_foliage(self, ctx: cairo.Context, e: VisibleEntity):
        x, y, r = e.center.x, e.center.y, e.size
        gradient = cairo.RadialGradient(x, y - r * 0.3, 0, x, y, r)
        gradient.add_color_stop_rgba(0, *e.entity.highlight_color, e.opacity)
        gradient.add_color_stop_rgba(1, *e.entity.base_color, e.opacity)
        ctx.save()
        ctx.translate(x, y)
        ctx.scale(self.config.foliage_aspect, 1.0)
        ctx.arc(0, 0, r, 0, 2 * math.pi)
        ctx.restore()
        ctx.set_source(gradient)
        ctx.fill()

    def _paint_petal(self, ctx: cairo.Context, e: VisibleEntity):
        s = e.size
        ctx.save()
        ctx.translate(e.center.x, e.center.y)
        ctx.rotate(e.entity.rotation)
        ctx.move_to(0, 0)
        ctx.curve_to(-s, -s, -s / 2, -s * 1.5, 0, -s * 0.8)
        ctx.curve_to(s / 2, -s * 1.5, s, -s, 0, 0)
        ctx.set_source_rgba(*e.entity.base_color, e.opacity)
        ctx.fill()
        ctx.restore()

    def _paint_sprite(self, ctx: cairo.Context, image: cairo.ImageSurface, x: float, y: float,
                      scale_x: float, scale_y: float, rotation: float, anchor_x: float, anchor_y: float,
                      opacity: float):
        if scale_x <= 0 or scale_y <= 0:
            return
        ctx.save()
        ctx.translate(x, y)
        ctx.rotate(rotation)
        ctx.scale(scale_x, scale_y)
        ctx.set_source_surface(image, -anchor_x, -anchor_y)
        ctx.get_source().set_filter(cairo.FILTER_GOOD)
        ctx.paint_with_alpha(opacity)
        ctx.restore()

    def _paint_fruit(self, ctx: cairo.Context, e: VisibleEntity):
        """Sprite centred on the entity, ``fruit_scale`` times its radius across."""
        image = self.sprites.get(e.entity.sprite)
        side = e.size * self.config.fruit_scale
        w, h = image.get_width(), image.get_height()
        self._paint_sprite(ctx, image, e.center.x, e.center.y, side / w, side / h, 0.0,
                           w / 2, h / 2, e.opacity)

    def _paint_cluster(self, ctx: cairo.Context, e: VisibleEntity):
        """Sprite hanging from its anchor (top-centre), rotated and scaled by growth."""
        image = self.sprites.get(e.entity.sprite)
        scale = e.size * self.config.cluster_scale
        self._paint_sprite(ctx, image, e.center.x, e.center.y, scale, scale, e.entity.rotation,
                           image.get_width() / 2, 0.0, e.opacity)

    def _paint_flower(self, ctx: cairo.Context, e: VisibleEntity):
        """Sprite centred on the entity, ``2 * size`` tall and rotated to its stem."""
        image = self.sprites.get(e.entity.sprite)
        height = e.size * 2
        width = height * self.config.flower_aspect
        w, h = image.get_width(), image.get_height()
        self._paint_sprite(ctx, image, e.center.x, e.center.y, width / w, height / h, e.entity.rotation,
                           w / 2, h / 2, e.opacity)

    def _draw_entities(self, ctx: cairo.Context, snapshot: GrowthSnapshot):
        for e in snapshot.ordered_entities():
            if e.opacity <= 0:
                continue
            self._painters[e.kind](ctx, e)

    # ==================== OUTPUT ====================

    def _render(self, snapshot: GrowthSnapshot) -> cairo.ImageSurface:
        surface, ctx = self._create_surface()
        self._draw_branches(ctx, snapshot)
        self._draw_entities(ctx, snapshot)
        surface.flush()
        return surface

    def render_frame(self, snapshot: GrowthSnapshot) -> np.ndarray:
        return self._surface_to_numpy(self._render(snapshot))

    def render_png(self, snapshot: GrowthSnapshot) -> bytes:
        return self._surface_to_png(self._render(snapshot))
