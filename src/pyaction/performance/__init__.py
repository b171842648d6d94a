from pyaction.performance.profiler import Profiler

__all__ = ['Profiler']
