"""QuizHub — quiz authoring and attempt scoring service.

Owners build quizzes and questions; takers browse published quizzes and
submit answers that are scored on the server against stored keys.
"""

__version__ = "0.1.0"
