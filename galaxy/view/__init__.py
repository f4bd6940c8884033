from .view_widget import GalaxyViewWidget

__all__ = ["GalaxyViewWidget"]
