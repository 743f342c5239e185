from .linop import (
    LinOp,
    DenseLinOp,
    DiagonalLinOp,
    TriangularLinOp,
    RootLinOp,
    CholeskyLinOp,
)
from .factorizations import (
    Factorization,
    Cholesky,
    PivotedCholesky,
    QR,
    cholesky,
    pivoted_cholesky,
    qr,
)
from .operations import reconstruct, combine
