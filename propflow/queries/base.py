"""Base query interface."""

from abc import ABC, abstractmethod
from typing import Generic, TypeVar

from ..config import PropFlowConfig
from ..source.workspace import Workspace

T = TypeVar("T")


class Query(ABC, Generic[T]):
    """Base query interface.

    Queries run against a Workspace: its files, search and parse cache.
    Nothing is stored on the query itself between executions.
    """

    def __init__(self, workspace: Workspace):
        self.workspace = workspace

    @property
    def config(self) -> PropFlowConfig:
        return self.workspace.config

    @abstractmethod
    def execute(self, **params) -> T:
        """Execute the query and return typed result."""
        pass
