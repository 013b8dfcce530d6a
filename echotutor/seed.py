"""Seed script to populate a demo study material with playable questions."""
import uuid
from echotutor.database import init_db, SessionLocal
from echotutor.models import StudyMaterial, Question, Difficulty
from echotutor.services.review import DEMO_USER_ID

DEMO_CONTENT = (
    "Cells are the basic unit of life. The nucleus stores genetic material in the form of DNA. "
    "Mitochondria produce most of the cell's ATP through cellular respiration, while ribosomes "
    "assemble proteins from amino acids. In plant cells, chloroplasts capture light energy during "
    "photosynthesis, and a rigid cell wall made of cellulose gives the cell its shape."
)

DEMO_QUESTIONS = [
    ("Which organelle produces most of a cell's ATP?", "Mitochondria", Difficulty.easy,
     "Cell Energy", "Mitochondria carry out cellular respiration, releasing energy stored as ATP."),
    ("Which organelle stores a eukaryotic cell's DNA?", "Nucleus", Difficulty.easy,
     "Cell Structure", "The nucleus holds the chromosomes and controls gene expression."),
    ("Which structures assemble proteins from amino acids?", "Ribosomes", Difficulty.medium,
     "Protein Synthesis", "Ribosomes translate messenger RNA into chains of amino acids."),
    ("Which process lets plants turn light into chemical energy?", "Photosynthesis", Difficulty.medium,
     "Plant Cells", "Chloroplasts use light energy to build sugars from carbon dioxide and water."),
    ("What polysaccharide makes up the plant cell wall?", "Cellulose", Difficulty.hard,
     "Plant Cells", "Cellulose fibres give the wall its strength and rigidity."),
]


def seed():
    """Seed the database with demo data."""
    # Initialize database tables
    init_db()

    # Create a database session
    db = SessionLocal()

    try:
        material_id = str(uuid.uuid4())
        material = StudyMaterial(
            id=material_id,
            user_id=DEMO_USER_ID,
            title="Demo Material: Cell Biology",
            content=DEMO_CONTENT,
            file_type="text",
        )
        db.add(material)

        questions = [
            Question(
                id=str(uuid.uuid4()),
                user_id=DEMO_USER_ID,
                material_id=material_id,
                question=question,
                answer=answer,
                difficulty=difficulty,
                topic=topic,
                explanation=explanation,
            )
            for question, answer, difficulty, topic, explanation in DEMO_QUESTIONS
        ]
        db.add_all(questions)

        # Commit the transaction
        db.commit()

        print(f"✓ Seeded demo data.")
        print(f"  - Created material: '{material.title}' (ID: {material_id})")
        print(f"  - Added {len(questions)} questions")

    except Exception as e:
        db.rollback()
        print(f"Error seeding data: {e}")
        raise
    finally:
        db.close()


if __name__ == "__main__":
    seed()
