"""
Calc engine: pure numeric computation core.

Unit conversion over declarative unit tables plus the algorithms behind
calculator tools (matrices, number theory, statistics, triangles, fractions).
Stateless and free of I/O apart from explicit unit table loading.
"""
