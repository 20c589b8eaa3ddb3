from .records import PersonalityAnswer, PersonalityResult, PsychologicalQuestion, QuizQuestion

__all__ = ["PersonalityAnswer", "PersonalityResult", "PsychologicalQuestion", "QuizQuestion"]
