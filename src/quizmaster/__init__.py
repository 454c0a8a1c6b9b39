"""Import multiple-choice quizzes from documents and play them."""
