"""Classes for building kernel regression models."""

from ._fast_krr import FastKernelRidge

__all__ = ["FastKernelRidge"]
