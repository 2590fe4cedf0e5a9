"""
Starter content: three trails of four tiered levels with Yoruba exercises,
plus the admin account.
"""
# pyright: reportAttributeAccessIssue=false
import json
import logging
from sqlmodel import Session, select
from typing import Dict, List, Optional, Tuple

from yoruba.models.models import User, Trail, Level, Exercise, UserRole, LevelColor, ExerciseType
from yoruba.services.reward_service import DEFAULT_LEVEL_XP

logger = logging.getLogger(__name__)

ADMIN_USERNAME = "admin"
ADMIN_EMAIL = "admin@yoruba.com"
ADMIN_PASSWORD = "admin123"

TRAILS = [
    ("Trilha 1", "Saudações"),
    ("Trilha 2", "Números"),
    ("Trilha 3", "Cores"),
]

LEVELS = [
    ("Básico", LevelColor.AMARELO),
    ("Intermediário", LevelColor.AZUL),
    ("Avançado", LevelColor.VERDE),
    ("Mestre", LevelColor.DOURADO),
]


def _choices(correct: int, *texts: str) -> List[Dict]:
    """Options with 1-based ids; correct is the id of the right one."""
    return [
        {"id": index, "text": text, "isCorrect": index == correct}
        for index, text in enumerate(texts, start=1)
    ]


# (trail order, level order) -> [(question, type, options, correct_answer)]
EXERCISES: Dict[Tuple[int, int], List[Tuple[str, ExerciseType, List[Dict], Optional[str]]]] = {
    (1, 1): [
        ("Bom dia", ExerciseType.MULTIPLE_CHOICE,
         _choices(1, "E kú àárọ̀", "E kú alẹ́", "E kú ilẹ̀", "O dabọ"), None),
        ("Boa tarde", ExerciseType.MULTIPLE_CHOICE,
         _choices(2, "E kú àárọ̀", "E kú ọsan", "E kú ilẹ̀", "O dabọ"), None),
        ("Boa noite", ExerciseType.MULTIPLE_CHOICE,
         _choices(3, "E kú àárọ̀", "E kú ọsan", "E kú alẹ́", "O dabọ"), None),
        ("Como você está?", ExerciseType.MULTIPLE_CHOICE,
         _choices(4, "Báwo ni?", "Báwo ni o?", "Báwo ni ọ?", "Báwo ni o wa?"), None),
        ("Eu estou bem", ExerciseType.MULTIPLE_CHOICE,
         _choices(1, "Mo wa dada", "Mo ni dada", "Mo fe dada", "Dada ni mo wa"), None),
    ],
    (1, 2): [
        ("Até logo", ExerciseType.MULTIPLE_CHOICE,
         _choices(2, "E kú àárọ̀", "O dabọ", "E kú alẹ́", "Adíọs"), None),
        ("Meu nome é ...", ExerciseType.FILL_BLANK, [], "Orúkọ mi ni ..."),
        ("Qual é o seu nome?", ExerciseType.MULTIPLE_CHOICE,
         _choices(1, "Kí ni orúkọ rẹ?", "Báwo ni o wa?", "Níbo ni o wà?", "Ṣé o ti jẹ?"), None),
    ],
    (2, 1): [
        ("Um", ExerciseType.MULTIPLE_CHOICE, _choices(1, "Ọkan", "Èjì", "Ẹta", "Ẹrin"), None),
        ("Dois", ExerciseType.MULTIPLE_CHOICE, _choices(2, "Ọkan", "Èjì", "Ẹta", "Ẹrin"), None),
        ("Três", ExerciseType.MULTIPLE_CHOICE, _choices(3, "Ọkan", "Èjì", "Ẹta", "Ẹrin"), None),
        ("Quatro", ExerciseType.MULTIPLE_CHOICE, _choices(4, "Ọkan", "Èjì", "Ẹta", "Ẹrin"), None),
        ("Cinco", ExerciseType.MULTIPLE_CHOICE, _choices(1, "Àrún", "Ẹfà", "Èje", "Ẹjọ"), None),
    ],
    (3, 1): [
        ("Vermelho", ExerciseType.MULTIPLE_CHOICE, _choices(1, "Pupa", "Dudu", "Funfun", "Awọ ewe"), None),
        ("Azul", ExerciseType.MULTIPLE_CHOICE, _choices(2, "Pupa", "Bluù", "Funfun", "Awọ ewe"), None),
        ("Verde", ExerciseType.MULTIPLE_CHOICE, _choices(4, "Pupa", "Dudu", "Funfun", "Awọ ewe"), None),
        ("Branco", ExerciseType.MULTIPLE_CHOICE, _choices(3, "Pupa", "Dudu", "Funfun", "Awọ ewe"), None),
        ("Preto", ExerciseType.MULTIPLE_CHOICE, _choices(2, "Pupa", "Dudu", "Funfun", "Awọ ewe"), None),
    ],
}


def seed_content(session: Session) -> bool:
    """
    Insert the admin account and starter content into an empty database.

    Returns:
        False when users already exist and nothing was inserted
    """
    if session.exec(select(User)).first():
        logger.info("Database already has users, skipping seed")
        return False

    session.add(User(
        username=ADMIN_USERNAME,
        email=ADMIN_EMAIL,
        password=User.hash_password(ADMIN_PASSWORD),
        role=UserRole.ADMIN
    ))

    exercises_created = 0
    for trail_order, (name, theme) in enumerate(TRAILS, start=1):
        trail = Trail(name=name, theme=theme, order=trail_order, is_active=True)
        session.add(trail)
        session.flush()

        for level_order, (level_name, color) in enumerate(LEVELS, start=1):
            level = Level(
                name=level_name,
                color=color,
                xp=DEFAULT_LEVEL_XP[color],
                trail_id=trail.id,
                order=level_order
            )
            session.add(level)
            session.flush()

            for question, exercise_type, options, correct_answer in EXERCISES.get((trail_order, level_order), []):
                session.add(Exercise(
                    question=question,
                    type=exercise_type,
                    options=json.dumps(options, ensure_ascii=False),
                    correct_answer=correct_answer,
                    level_id=level.id
                ))
                exercises_created += 1

    session.commit()
    logger.info(
        f"Seeded admin account, {len(TRAILS)} trails, {len(TRAILS) * len(LEVELS)} levels "
        f"and {exercises_created} exercises"
    )
    return True
