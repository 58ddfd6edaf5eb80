"""A tree-walking interpreter for the Lox language.

The pipeline is scanner, parser, resolver and interpreter, wired together
by ``lox.main``. ``lox.ast_printer`` renders expression trees for
debugging.
"""
