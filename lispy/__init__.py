# Lispy: a small S-expression language with Q-expressions, builtins and
# curried lambdas.
#
# Naming guidance:
# - SExpr / QExpr: the active and quoted list values (lispy.types.value).
# - AstNode: the syntax tree handed over by the parser (lispy.reader.ast).
# Values are evaluated by lispy.evaluation.evaluator.evaluate(env, value).

__version__ = "0.0.0.0.7"
