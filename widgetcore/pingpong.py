"""A pair of render resources whose source and target roles can be swapped."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional


class ResourceType(Enum):
    """Which side of the pair a set of resources belongs to."""

    SOURCE = 0
    TARGET = 1


@dataclass
class Resources:
    """A texture together with its render-target and shader-resource views."""

    texture: Any
    render_target: Any
    shader_resource: Any


class PingPong:
    """Keeps a source and a target resource set; :meth:`swap` exchanges them."""

    def __init__(self) -> None:
        self._source: Optional[Resources] = None
        self._target: Optional[Resources] = None

    def setup(
        self,
        kind: ResourceType,
        texture: Any,
        render_target: Any,
        shader_resource: Any,
    ) -> None:
        """Install resources as the source or the target, replacing any set before."""
        resources = Resources(texture, render_target, shader_resource)
        kind = ResourceType(kind)
        if kind is ResourceType.SOURCE:
            self._source = resources
        else:
            self._target = resources

    @property
    def _src(self) -> Resources:
        if self._source is None:
            raise RuntimeError("source resources have not been set up")
        return self._source

    @property
    def _dst(self) -> Resources:
        if self._target is None:
            raise RuntimeError("target resources have not been set up")
        return self._target

    def source_texture(self) -> Any:
        """Return the source texture."""
        return self._src.texture

    def target_texture(self) -> Any:
        """Return the target texture."""
        return self._dst.texture

    def render_target(self) -> Any:
        """Return the target's render-target view."""
        return self._dst.render_target

    def source_view(self) -> Any:
        """Return the source's shader-resource view."""
        return self._src.shader_resource

    def target_view(self) -> Any:
        """Return the target's shader-resource view."""
        return self._dst.shader_resource

    def swap(self) -> None:
        """Exchange the source and target resources."""
        self._source, self._target = self._target, self._source