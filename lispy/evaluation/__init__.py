from lispy.evaluation.evaluator import evaluate
from lispy.evaluation.apply import apply
