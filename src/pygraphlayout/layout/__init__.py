"""Layout algorithms for 2D graph drawing.

This module contains the coordinate store shared by every layout, the
force-directed family (spring, Fruchterman-Reingold, DAG, ISOM,
Kamada-Kawai), the deterministic geometric family (circle, tree, radial,
balloon) and the compositional layouts (aggregate, decorator).
"""

from pygraphlayout.layout.base import AbstractLayout, IterativeContext, Layout, NodeDataMap, is_iterative
from pygraphlayout.layout.box import BoundingBox
from pygraphlayout.layout.seed import RandomLocationSeed
from pygraphlayout.layout.spring import SpringLayout
from pygraphlayout.layout.fr import FRLayout, FRLayout2
from pygraphlayout.layout.dag import DAGLayout
from pygraphlayout.layout.isom import ISOMLayout
from pygraphlayout.layout.kk import KKLayout
from pygraphlayout.layout.circle import CircleLayout
from pygraphlayout.layout.tree import TreeLayout
from pygraphlayout.layout.radial import RadialTreeLayout
from pygraphlayout.layout.balloon import BalloonLayout
from pygraphlayout.layout.static import StaticLayout
from pygraphlayout.layout.aggregate import AggregateLayout
from pygraphlayout.layout.decorator import LayoutDecorator

__all__ = [
    "AbstractLayout",
    "AggregateLayout",
    "BalloonLayout",
    "BoundingBox",
    "CircleLayout",
    "DAGLayout",
    "FRLayout",
    "FRLayout2",
    "ISOMLayout",
    "IterativeContext",
    "KKLayout",
    "Layout",
    "LayoutDecorator",
    "NodeDataMap",
    "RadialTreeLayout",
    "RandomLocationSeed",
    "SpringLayout",
    "StaticLayout",
    "TreeLayout",
    "is_iterative",
]
