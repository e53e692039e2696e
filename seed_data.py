from app import app, db
from models import Category, DifficultyLevel, Question, QuestionOption, User

DIFFICULTY_LEVELS = [
    ("Beginner", "Basic level questions for beginners", 1),
    ("Intermediate", "Intermediate level questions", 2),
    ("Advanced", "Advanced level questions for experienced learners", 3),
]

CATEGORIES = [
    ("Grammar", "English grammar questions covering tenses, parts of speech, and sentence structure"),
    ("Vocabulary", "Word meanings, synonyms, antonyms, and usage"),
    ("Reading Comprehension", "Understanding and analyzing written texts"),
    ("Listening", "Audio-based questions for listening skills"),
    ("Writing", "Writing skills and composition questions"),
    ("Speaking", "Pronunciation and speaking-related questions"),
]

# (category, difficulty, text, explanation, options, index of the correct option)
QUESTIONS = [
    ("Grammar", "Beginner", 'What is the correct form of the verb "to be" for the pronoun "I"?',
     'The correct form of "to be" for "I" is "am".', ["am", "is", "are", "be"], 0),
    ("Grammar", "Beginner", "Which of the following is a noun?",
     'A noun names a person, place, thing, or idea. "Book" is a thing.', ["quickly", "book", "run", "beautiful"], 1),
    ("Grammar", "Beginner", 'What is the past tense of "go"?',
     'The past tense of "go" is "went".', ["goed", "went", "gone", "going"], 1),
    ("Grammar", "Intermediate", "Which sentence uses the present perfect tense correctly?",
     'Present perfect is "have/has" + past participle.',
     ["I am studying English for two years", "I study English for two years",
      "I have studied English for two years", "I studied English for two years"], 2),
    ("Vocabulary", "Beginner", 'Which word is the opposite of "big"?',
     '"Small" is the antonym of "big".', ["large", "huge", "small", "tall"], 2),
    ("Vocabulary", "Intermediate", 'What does "procrastinate" mean?',
     "Procrastinate means to delay or postpone action.",
     ["to work quickly", "to delay or postpone", "to finish early", "to work together"], 1),
    ("Reading Comprehension", "Beginner", 'Read: "The cat sat on the mat." Where did the cat sit?',
     'The text states that the cat sat "on the mat".', ["on the chair", "on the mat", "on the bed", "on the floor"], 1),
]

USERS = [
    ("admin", "Super", "Tutor", "super_tutor"),
    ("tutor", "Demo", "Tutor", "tutor"),
    ("student", "Demo", "Student", "student"),
]

with app.app_context():
    levels = {}
    for name, description, order_index in DIFFICULTY_LEVELS:
        level = DifficultyLevel.query.filter_by(name=name).first()
        if not level:
            level = DifficultyLevel(name=name, description=description, order_index=order_index)
            db.session.add(level)
        levels[name] = level

    for username, first_name, last_name, role in USERS:
        if not User.query.filter_by(username=username).first():
            db.session.add(User(username=username, first_name=first_name, last_name=last_name, role=role))
    db.session.flush()
    author = User.query.filter_by(username="tutor").first()

    categories = {}
    for name, description in CATEGORIES:
        category = Category.query.filter_by(name=name).first()
        if not category:
            category = Category(name=name, description=description, created_by=author.id)
            db.session.add(category)
        categories[name] = category
    db.session.flush()

    added = 0
    for category, level, text, explanation, options, correct in QUESTIONS:
        if Question.query.filter_by(question_text=text).first():
            continue
        question = Question(
            category_id=categories[category].id,
            difficulty_id=levels[level].id,
            question_text=text,
            explanation=explanation,
            created_by=author.id,
        )
        question.options = [
            QuestionOption(option_text=option, is_correct=index == correct, order_index=index)
            for index, option in enumerate(options)
        ]
        db.session.add(question)
        added += 1

    db.session.commit()
    print(f"Seed data loaded: {added} new questions")
