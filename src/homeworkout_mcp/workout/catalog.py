"""Exercise catalog: the seed library and catalog file handling."""

import json
import logging
from typing import Sequence

from pydantic import ValidationError

from homeworkout_mcp.workout.exceptions import ExerciseNotFound, ImportEmptyError, ImportParseError
from homeworkout_mcp.workout.models import Equipment, Exercise, MuscleGroup
from homeworkout_mcp.workout.store import CATALOG_KEY, KeyValueStore
from homeworkout_mcp.workout.transfer import has_required_fields, load_json, new_id

logger = logging.getLogger(__name__)


def _exercise(id, name, muscle_group, equipment, description, video_url=None):
    return Exercise(
        id=id, name=name, muscle_group=muscle_group, equipment=equipment,
        description=description, video_url=video_url,
    )


DEFAULT_CATALOG: list[Exercise] = [
    # Abs
    _exercise("1", "Bicycle Crunches", MuscleGroup.ABS, Equipment.UNWEIGHTED,
              "Lie on your back and alternate elbow to opposite knee in a pedaling motion.",
              "https://www.youtube.com/watch?v=VaL7XWK3MVE&ab_channel=Medbridge"),
    _exercise("2", "Levitation Crunch", MuscleGroup.ABS, Equipment.UNWEIGHTED,
              "Lift your legs and shoulders off the ground and hold the position briefly."),
    _exercise("3", "Russian Twists", MuscleGroup.ABS, Equipment.UNWEIGHTED,
              "Sit with feet off the ground and twist your torso side to side.",
              "https://www.youtube.com/watch?v=wkD8rjkodUI"),
    _exercise("4", "Plank", MuscleGroup.ABS, Equipment.UNWEIGHTED,
              "Hold a straight-body position supported by forearms and toes.",
              "https://www.youtube.com/watch?v=ASdvN_XEl_c"),
    _exercise("5", "Side Bridge Twists", MuscleGroup.ABS, Equipment.UNWEIGHTED,
              "Hold a side plank and twist your torso under and back up."),
    _exercise("6", "Lying Leg Raises", MuscleGroup.ABS, Equipment.UNWEIGHTED,
              "Lie on your back and lift your legs up together without bending the knees."),
    _exercise("7", "Mountain Climbers", MuscleGroup.ABS, Equipment.UNWEIGHTED,
              "In plank position, alternate driving your knees toward your chest quickly."),
    _exercise("8", "Swipers", MuscleGroup.ABS, Equipment.UNWEIGHTED,
              "Sit and pass your feet over an object while keeping your hands behind you for support."),
    _exercise("9", "Sliding Tucks", MuscleGroup.ABS, Equipment.UNWEIGHTED,
              "From a plank, slide your feet forward to your chest and back using socks or sliders."),
    _exercise("10", "Side Planks", MuscleGroup.ABS, Equipment.UNWEIGHTED,
              "Hold your body in a straight line on your side supported by one forearm."),

    # Back
    _exercise("11", "Deadlifts", MuscleGroup.BACK, Equipment.WEIGHTED,
              "Stand and lower dumbbells while keeping your back straight, then lift back up."),
    _exercise("12", "Renegade Rows", MuscleGroup.BACK, Equipment.WEIGHTED,
              "In a plank position, row each dumbbell alternately while maintaining balance."),
    _exercise("13", "Dumbbell Tripod Rows", MuscleGroup.BACK, Equipment.WEIGHTED,
              "Place one hand on a bench and row a dumbbell with the other hand."),
    _exercise("14", "Dead Row", MuscleGroup.BACK, Equipment.WEIGHTED,
              "Perform a row starting from a dead stop at the bottom of the movement."),
    _exercise("15", "Dumbbell Row", MuscleGroup.BACK, Equipment.WEIGHTED,
              "Bend over and pull the dumbbell toward your waist."),
    _exercise("16", "Pullover", MuscleGroup.BACK, Equipment.WEIGHTED,
              "Lie on your back and bring a dumbbell from overhead to above your chest."),
    _exercise("17", "Dumbbell Rows", MuscleGroup.BACK, Equipment.WEIGHTED,
              "Pull the dumbbells toward your torso while bent over."),
    _exercise("18", "Pull-ups", MuscleGroup.BACK, Equipment.UNWEIGHTED,
              "Hang from a bar and pull your chin above the bar.",
              "https://www.youtube.com/watch?v=eGo4IYlbE5g"),
    _exercise("19", "Dumbbell Deadlifts", MuscleGroup.BACK, Equipment.WEIGHTED,
              "Lower dumbbells to mid-shin while keeping your back straight, then lift."),

    # Biceps
    _exercise("20", "Dumbbell Curls", MuscleGroup.BICEPS, Equipment.WEIGHTED,
              "Curl the dumbbells from your sides to your shoulders."),
    _exercise("21", "Hammer Curls", MuscleGroup.BICEPS, Equipment.WEIGHTED,
              "Curl dumbbells with palms facing each other."),
    _exercise("22", "DB Concentration Curls", MuscleGroup.BICEPS, Equipment.WEIGHTED,
              "Sit and curl a dumbbell with your elbow resting on your thigh."),
    _exercise("23", "Zottman Curls", MuscleGroup.BICEPS, Equipment.WEIGHTED,
              "Curl dumbbells up normally, rotate wrists, and lower with palms down."),
    _exercise("24", "Dumbbell Drag Curls", MuscleGroup.BICEPS, Equipment.WEIGHTED,
              "Curl dumbbells while dragging your elbows behind your torso."),
    _exercise("25", "DB Incline Curls", MuscleGroup.BICEPS, Equipment.WEIGHTED,
              "Lie back on an incline and curl dumbbells with full range of motion."),
    _exercise("26", "Dumbbell Bicep Curls", MuscleGroup.BICEPS, Equipment.WEIGHTED,
              "Lift the dumbbells toward your shoulders by flexing your elbows."),

    # Chest
    _exercise("27", "Bench Press", MuscleGroup.CHEST, Equipment.WEIGHTED,
              "Lie on a flat surface and press dumbbells upward from your chest."),
    _exercise("28", "Push-ups", MuscleGroup.CHEST, Equipment.UNWEIGHTED,
              "Lower and raise your body using your arms in a plank position.",
              "https://www.youtube.com/watch?v=IODxDxX7oi4"),
    _exercise("29", "Dumbbell Flyes", MuscleGroup.CHEST, Equipment.WEIGHTED,
              "With arms extended, lower dumbbells out to the sides and bring them back up."),
    _exercise("30", "Dumbbell Bench Press", MuscleGroup.CHEST, Equipment.WEIGHTED,
              "Lie down and press dumbbells from chest level to above your shoulders."),

    # Legs
    _exercise("31", "Deadlifts", MuscleGroup.LEGS, Equipment.WEIGHTED,
              "Lower dumbbells while keeping legs slightly bent and back straight."),
    _exercise("32", "Hyperextensions", MuscleGroup.LEGS, Equipment.UNWEIGHTED,
              "Bend forward at the waist and lift your torso back to alignment."),
    _exercise("33", "Dumbbell Squats", MuscleGroup.LEGS, Equipment.WEIGHTED,
              "Hold dumbbells and squat down until thighs are parallel to the ground."),
    _exercise("34", "Dumbbell Lunges", MuscleGroup.LEGS, Equipment.WEIGHTED,
              "Step forward into a lunge position while holding dumbbells."),
    _exercise("35", "Leg Extensions", MuscleGroup.LEGS, Equipment.UNWEIGHTED,
              "Straighten your knee from a seated position using your legs."),
    _exercise("36", "Squats", MuscleGroup.LEGS, Equipment.UNWEIGHTED,
              "Lower your hips from a standing position and rise back up."),
    _exercise("37", "Lunges", MuscleGroup.LEGS, Equipment.UNWEIGHTED,
              "Step forward and bend both knees to 90 degrees, then return."),

    # Shoulders
    _exercise("38", "DB Scoop Press", MuscleGroup.SHOULDERS, Equipment.WEIGHTED,
              "Lift dumbbells in an upward and inward scoop motion overhead."),
    _exercise("39", "Arnold Press", MuscleGroup.SHOULDERS, Equipment.WEIGHTED,
              "Rotate dumbbells from front to overhead press position."),
    _exercise("40", "DB Lateral Raises", MuscleGroup.SHOULDERS, Equipment.WEIGHTED,
              "Lift dumbbells out to the sides up to shoulder height."),
    _exercise("41", "DP Hip Huggers", MuscleGroup.SHOULDERS, Equipment.WEIGHTED,
              "Lift dumbbells slightly forward and up close to the body."),
    _exercise("42", "DB Front Raises", MuscleGroup.SHOULDERS, Equipment.WEIGHTED,
              "Lift dumbbells forward until they reach shoulder height."),
    _exercise("43", "DB Rear Delt Rows", MuscleGroup.SHOULDERS, Equipment.WEIGHTED,
              "Bend forward and row dumbbells outward to target rear delts."),
    _exercise("44", "DB Over Head Press", MuscleGroup.SHOULDERS, Equipment.WEIGHTED,
              "Press dumbbells vertically overhead from shoulder level."),
    _exercise("45", "Dumbbell Shoulder Press", MuscleGroup.SHOULDERS, Equipment.WEIGHTED,
              "Press dumbbells upward from shoulder height until arms are extended."),

    # Triceps
    _exercise("46", "Diamond Push-Ups", MuscleGroup.TRICEPS, Equipment.UNWEIGHTED,
              "Place hands close together and perform a push-up to target triceps."),
    _exercise("47", "Cobra Push-Ups", MuscleGroup.TRICEPS, Equipment.UNWEIGHTED,
              "Push-up variation with elbows close to body and hips low."),
    _exercise("48", "JM Press", MuscleGroup.TRICEPS, Equipment.WEIGHTED,
              "Lower dumbbells toward the forehead, then press upward."),
    _exercise("49", "Triceps Kickbacks", MuscleGroup.TRICEPS, Equipment.WEIGHTED,
              "Extend your arm back from a bent-over position to contract triceps."),
    _exercise("50", "DB Incline Powerbombs", MuscleGroup.TRICEPS, Equipment.WEIGHTED,
              "Press dumbbells overhead at an incline to target triceps."),
    _exercise("51", "Close Grip Bench Press", MuscleGroup.TRICEPS, Equipment.WEIGHTED,
              "Press dumbbells from chest level with hands close together."),
    _exercise("52", "Lying Triceps Extensions", MuscleGroup.TRICEPS, Equipment.WEIGHTED,
              "Lie down and extend dumbbells from forehead to straight arms."),
    _exercise("53", "1 Arm Over Head Triceps", MuscleGroup.TRICEPS, Equipment.WEIGHTED,
              "Extend one arm overhead with a dumbbell, lowering and lifting behind the head."),
    _exercise("54", "Dumbbell Tricep Extensions", MuscleGroup.TRICEPS, Equipment.WEIGHTED,
              "Lift a dumbbell overhead and lower behind the head, then extend arms."),
]


def load_catalog(store: KeyValueStore) -> list[Exercise]:
    """Read the catalog, seeding it with the default library on first use."""
    data = store.get(CATALOG_KEY)
    if data is None:
        logger.info("Seeding catalog with %d default exercises", len(DEFAULT_CATALOG))
        save_catalog(store, DEFAULT_CATALOG)
        return list(DEFAULT_CATALOG)
    return [Exercise.model_validate(entry) for entry in data]


def save_catalog(store: KeyValueStore, catalog: Sequence[Exercise]) -> None:
    store.set(CATALOG_KEY, [ex.to_json_dict() for ex in catalog])


def find_exercises(catalog: Sequence[Exercise], exercise_ids: Sequence[str]) -> list[Exercise]:
    """Look up exercises by id, in the order given."""
    by_id = {ex.id: ex for ex in catalog}
    missing = [i for i in exercise_ids if i not in by_id]
    if missing:
        raise ExerciseNotFound(missing[0])
    return [by_id[i] for i in exercise_ids]


def add_catalog_exercise(
    store: KeyValueStore,
    name: str,
    muscle_group: MuscleGroup | str,
    equipment: Equipment | str,
    description: str | None = None,
    video_url: str | None = None,
) -> Exercise:
    exercise = Exercise(
        id=new_id(),
        name=name,
        muscle_group=muscle_group,
        equipment=equipment,
        description=description or None,
        video_url=video_url or None,
    )
    catalog = load_catalog(store)
    catalog.append(exercise)
    save_catalog(store, catalog)
    logger.info("Added exercise %s (%s)", exercise.name, exercise.id)
    return exercise


def remove_catalog_exercise(store: KeyValueStore, exercise_id: str) -> Exercise:
    catalog = load_catalog(store)
    for i, ex in enumerate(catalog):
        if ex.id == exercise_id:
            del catalog[i]
            save_catalog(store, catalog)
            logger.info("Removed exercise %s (%s)", ex.name, ex.id)
            return ex
    raise ExerciseNotFound(exercise_id)


def count_by_group(catalog: Sequence[Exercise]) -> dict[MuscleGroup, int]:
    counts = {group: 0 for group in MuscleGroup}
    for ex in catalog:
        counts[ex.muscle_group] += 1
    return counts


def parse_catalog(text: str | bytes) -> list[Exercise]:
    """Read a catalog file: a JSON list of exercises. Invalid entries are dropped."""
    data = load_json(text)
    if not isinstance(data, list):
        raise ImportParseError("Invalid file format - expected a list of exercises")

    exercises = []
    for entry in data:
        if not has_required_fields(entry):
            continue
        entry = dict(entry)
        if not entry.get("id"):
            entry["id"] = new_id()
        try:
            exercises.append(Exercise.model_validate(entry))
        except ValidationError as e:
            logger.debug("Skipping invalid exercise %r: %s", entry.get("name"), e)

    if not exercises:
        raise ImportEmptyError("No valid exercises found in file")
    return exercises


def dumps_catalog(catalog: Sequence[Exercise]) -> str:
    return json.dumps([ex.to_json_dict() for ex in catalog], indent=2)
