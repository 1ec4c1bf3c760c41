"""
scikit-drr
==========

scikit-drr implements Dimensionality Reduction via Regression (DRR), a nonlinear and
invertible generalisation of principal component analysis, following the
`scikit-learn <https://scikit-learn.org/>`_ API and coding guidelines to promote
usability and interoperability with existing workflows.
"""

from ._version import __version__  # noqa: F401
