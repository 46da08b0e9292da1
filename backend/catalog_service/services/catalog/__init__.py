"""
Product read models built on top of the catalog tables.
"""

from .question_tree import QuestionTreeExpander

__all__ = ["QuestionTreeExpander"]
