"""Prompt text for each generation request."""


def practice_test_prompt(subjects: str, topics: str, count: int, exam_level: str) -> str:
    return (
        f"Create a professional {count}-question practice test for the following subject(s): "
        f"{subjects}, specifically focusing on these topic(s): \"{topics}\" for the {exam_level} "
        "examination.\n\n"
        "Strict Requirements:\n"
        "1. Standards: Align perfectly with the latest NTA (National Testing Agency) standards, "
        "question patterns, and current syllabus.\n"
        "2. Question Types: Include a balanced mix of Single Correct Multiple Choice Questions "
        "(MCQs) and Numerical Value Type Questions (where the answer is a specific number).\n"
        "3. Mixed Content: If multiple subjects or topics are provided, distribute the questions "
        "proportionally across them.\n"
        "4. Difficulty Distribution: Simulate a real exam with approximately 20% Easy, 50% "
        "Moderate, and 30% Challenging questions.\n"
        "5. Quality: Focus on conceptual application, multi-step reasoning, and analytical depth. "
        "Avoid purely memory-based questions.\n"
        "6. Solutions: Provide a meticulous, step-by-step mathematical or logical derivation for "
        "every solution, ensuring conceptual clarity.\n"
        "7. Answers: For MCQs the correct answer is the option letter (A, B, C or D); for "
        "numerical questions it is the bare number."
    )


def formula_card_prompt(topic: str, exam: str) -> str:
    return (
        f"Summarize the key formulas, important reactions (if applicable), and essential concepts "
        f"for {topic} for the {exam} syllabus. Present them as bulleted points for quick revision "
        "and include one common shortcut or tip for solving problems."
    )


def time_table_prompt(hours: int, exam: str, weak_areas: str, focus_subjects: str) -> str:
    return (
        f"Generate a high-productivity daily study time table for a student preparing for {exam}.\n"
        f"Daily Study Capacity: {hours} hours.\n"
        f"Focus Subjects: {focus_subjects}.\n"
        f"Weak Areas to prioritize: {weak_areas or 'None specified'}.\n"
        "Provide a detailed hourly schedule including breaks, theory, and practice sessions. "
        "Ensure the distribution of time is balanced between the selected focus subjects."
    )


def pyq_test_prompt(exam: str, subject: str, topic: str, count: int = 10) -> str:
    return (
        f"Generate a realistic {count}-question MCQ test of Previous Year Questions (PYQs) for "
        f"{exam} targeting the topic: \"{topic}\" in {subject}.\n"
        "Requirements:\n"
        f"- Authenticity: Questions must mirror official {exam} format and difficulty.\n"
        "- Variety: Mix of easy, medium, and hard levels.\n"
        "- Detailed Solutions: Provide step-by-step logic for each.\n"
        "- Answers: The correct answer is the option letter (A, B, C or D)."
    )


def pyq_solution_prompt(question: str, exam: str, year: str, subject: str) -> str:
    return (
        f"Solve the following Previous Year Question (PYQ) from {exam} {year} {subject}.\n"
        f"Question: {question}\n\n"
        "Provide:\n"
        "1. The underlying fundamental concept.\n"
        "2. A step-by-step mathematical derivation or logical explanation.\n"
        "3. A \"Pro-Tip\" or shortcut for solving similar questions faster in the actual exam."
    )
