from __future__ import annotations
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .spaces import ColorType

import logging
import threading

import networkx as nx
import numpy as np

from typing import Callable, Optional, Type

from .exceptions import (
    DisconnectedGraphError,
    GraphConfigurationError,
    InvalidTransformationError,
    MissingPivotError,
    PivotCycleError,
)
from .parameters import Defaults
from .transformation import Transformation, compose, adaptation_transformation_generator


logger = logging.getLogger(__name__)


# region Transformation logic
class ConversionGraph:
    """
    Singleton class holding the conversion graph. Nodes are color types, edges carry the transformation
    function between their endpoints. Color types join the graph when they are defined.
    """
    __transformation_graph: nx.DiGraph = nx.DiGraph()
    """
    Graph used to find and compose transformations
    """

    __names: dict[str, Type[ColorType]] = dict()
    """
    Registered color types by name, used to resolve pivots declared as strings
    """

    __transformation_cache: dict[tuple[Type[ColorType], Type[ColorType]], Transformation] = dict()
    """
    Composed transformations by (origin, destination). Cleared whenever the graph changes.
    """

    lock = threading.RLock()
    """
    Guards the graph, the name map, the cache and the creation of family variants. Reentrant, since
    creating a variant registers it.
    """

    PIVOT_EDGE = "pivot"
    DIRECT_EDGE = "direct"
    ADAPTATION_EDGE = "adaptation"

    # region Registration
    @classmethod
    def register(cls, space: Type[ColorType]):
        """
        Adds a color type to the graph together with the edges to and from its pivot, then checks that
        the whole graph is still connected through the hub.
        """
        with cls.lock:
            cls._register(space)

    @classmethod
    def _register(cls, space: Type[ColorType]):
        if space in cls.__transformation_graph:
            return

        # Validates the pivot chain before touching the graph
        pivot = cls.resolve_pivot(space)
        hub = cls.find_hub(space)

        registered = cls.__names.get(space.__name__)
        if registered is not None:
            raise GraphConfigurationError("The name {!r} is already taken by {}.".format(
                space.__name__, registered.__module__ + "." + registered.__qualname__
            ))

        cls.__transformation_graph.add_node(space)
        cls.__names[space.__name__] = space

        if space.is_hub:
            cls._connect_hub(space)
        else:
            cls.__transformation_graph.add_edge(space, pivot, func=space.to_pivot, kind=cls.PIVOT_EDGE, weight=1)
            cls.__transformation_graph.add_edge(pivot, space, func=space.from_pivot, kind=cls.PIVOT_EDGE, weight=1)

        cls._clear_cache()
        logger.debug("Registered color type %s (pivot %s, hub %s)", space.__name__,
                     pivot.__name__ if pivot is not None else None, hub.__name__)

        # Every space must reach, and be reachable from, its hub
        if not (nx.has_path(cls.__transformation_graph, space, hub) and
                nx.has_path(cls.__transformation_graph, hub, space)):
            cls.__transformation_graph.remove_node(space)
            cls.__names.pop(space.__name__, None)
            cls._clear_cache()
            raise DisconnectedGraphError("{} is not connected to the hub space {}.".format(space.__name__, hub.__name__))

    @classmethod
    def _connect_hub(cls, hub: Type[ColorType]):
        """
        Connects a new hub space to every existing hub space with chromatic adaptation edges
        """
        for other in list(cls.__transformation_graph.nodes):
            if other is hub or not other.is_hub:
                continue
            cls.__transformation_graph.add_edge(
                hub, other,
                func=adaptation_transformation_generator(hub.white_point, other.white_point, Defaults.adaptation),
                kind=cls.ADAPTATION_EDGE,
                weight=1
            )
            cls.__transformation_graph.add_edge(
                other, hub,
                func=adaptation_transformation_generator(other.white_point, hub.white_point, Defaults.adaptation),
                kind=cls.ADAPTATION_EDGE,
                weight=1
            )

    @classmethod
    def add_direct_transformation(
            cls,
            origin: Type[ColorType],
            destination: Type[ColorType],
            func: Transformation):
        """
        Registers a specialized transformation between two registered spaces. Direct edges are a
        shortcut and must agree with the composed path through the hub.
        """
        with cls.lock:
            for space in (origin, destination):
                if space not in cls.__transformation_graph:
                    raise InvalidTransformationError("{} is not a registered color type.".format(space.__name__))

            cls.__transformation_graph.add_edge(origin, destination, func=func, kind=cls.DIRECT_EDGE, weight=1)
            cls._clear_cache()
        logger.debug("Registered direct transformation %s -> %s", origin.__name__, destination.__name__)
    # endregion

    # region Pivot resolution
    @classmethod
    def lookup(cls, name: str) -> Optional[Type[ColorType]]:
        """
        :returns: The registered color type with the given name, or None
        """
        return cls.__names.get(name)

    @classmethod
    def resolve_pivot(cls, space: Type[ColorType]) -> Optional[Type[ColorType]]:
        """
        Resolves the pivot declared by a color type. Hub spaces have no pivot.
        """
        if space.is_hub:
            return None

        pivot = space.declared_pivot()
        if pivot is None:
            raise MissingPivotError("{} declares no pivot space.".format(space.__name__))

        if isinstance(pivot, str):
            resolved = cls.lookup(pivot)
            if resolved is None:
                raise MissingPivotError("The pivot {!r} of {} is not a registered color type.".format(
                    pivot, space.__name__
                ))
            pivot = resolved

        if pivot is space:
            raise PivotCycleError("{} declares itself as its pivot.".format(space.__name__))
        if not (isinstance(pivot, type) and pivot in cls.__transformation_graph):
            raise MissingPivotError("The pivot {!r} of {} is not a registered color type.".format(
                pivot, space.__name__
            ))
        return pivot

    @classmethod
    def find_hub(cls, space: Type[ColorType]) -> Type[ColorType]:
        """
        Follows the pivot chain of a color type until it reaches a hub space.
        """
        visited = [space]
        current = space
        while not current.is_hub:
            current = cls.resolve_pivot(current)
            if current in visited:
                raise PivotCycleError("The pivot chain {} never reaches a hub space.".format(
                    " -> ".join(node.__name__ for node in visited + [current])
                ))
            visited.append(current)
        return current
    # endregion

    # region Queries
    @classmethod
    def spaces(cls) -> list[Type[ColorType]]:
        """
        :returns: Every registered color type
        """
        with cls.lock:
            return list(cls.__transformation_graph.nodes)

    @classmethod
    def check_transformation_validity(cls, origin_class: Type[ColorType], destination_class: Type[ColorType]) -> bool:
        with cls.lock:
            if origin_class not in cls.__transformation_graph or destination_class not in cls.__transformation_graph:
                return False
            return nx.has_path(cls.__transformation_graph, origin_class, destination_class)

    @classmethod
    def is_connected(cls) -> bool:
        """
        :returns: True if every registered color type converts to every other one
        """
        with cls.lock:
            return nx.is_strongly_connected(cls.__transformation_graph)

    @classmethod
    def path(cls, origin_class: Type[ColorType], destination_class: Type[ColorType]) -> list[Type[ColorType]]:
        """
        :returns: The color types visited by the conversion, both endpoints included
        """
        with cls.lock:
            if not cls.check_transformation_validity(origin_class, destination_class):
                raise InvalidTransformationError("The casting from {} to {} is impossible.".format(
                    getattr(origin_class, "__name__", origin_class), getattr(destination_class, "__name__", destination_class)
                ))
            return nx.shortest_path(cls.__transformation_graph, origin_class, destination_class, weight="weight")

    @classmethod
    def edge_kind(cls, origin: Type[ColorType], destination: Type[ColorType]) -> str:
        with cls.lock:
            return cls.__transformation_graph[origin][destination]["kind"]

    @classmethod
    def transformation(cls, origin_class: Type[ColorType], destination_class: Type[ColorType]) -> Transformation:
        """
        Composes the edge functions along the shortest path. Results are cached until the graph changes.
        """
        return cls._cached_transformation(origin_class, destination_class)

    @classmethod
    def hub_transformation(cls, origin_class: Type[ColorType], destination_class: Type[ColorType]) -> Transformation:
        """
        Composes the transformation through the hub space of the origin, ignoring direct edges that
        bypass it.
        """
        with cls.lock:
            hub = cls.find_hub(origin_class)
            return compose(
                cls._compose_path(cls._path_avoiding_direct_edges(origin_class, hub)),
                cls._compose_path(cls._path_avoiding_direct_edges(hub, destination_class))
            )
    # endregion

    # region Helpers
    @classmethod
    def _path_avoiding_direct_edges(cls, origin_class, destination_class) -> list:
        view = nx.subgraph_view(
            cls.__transformation_graph,
            filter_edge=lambda u, v: cls.__transformation_graph[u][v]["kind"] != cls.DIRECT_EDGE
        )
        return nx.shortest_path(view, origin_class, destination_class)

    @classmethod
    def _compose_path(cls, path: list) -> Transformation:
        functions: list[Callable[[np.ndarray], np.ndarray]] = [
            cls.__transformation_graph[edge_origin][edge_destination]["func"]
            for edge_origin, edge_destination in zip(path, path[1:])
        ]
        return compose(*functions)

    @classmethod
    def _cached_transformation(cls, origin_class, destination_class) -> Transformation:
        key = (origin_class, destination_class)
        transformation = cls.__transformation_cache.get(key)
        if transformation is not None:
            return transformation

        with cls.lock:
            if key not in cls.__transformation_cache:
                path = cls.path(origin_class, destination_class)
                logger.debug("Resolved %s", " -> ".join(node.__name__ for node in path))
                cls.__transformation_cache[key] = cls._compose_path(path)
            return cls.__transformation_cache[key]

    @classmethod
    def _clear_cache(cls):
        cls.__transformation_cache.clear()
    # endregion
# endregion
