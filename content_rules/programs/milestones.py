"""Predefined developmental milestones for the first weeks of life."""

from __future__ import annotations

from typing import Any

from ..conditions import postpartum, scope
from ..models import Scope, Screen, Slot
from ..rules import Program

# (day, title, type, priority, description)
DAY_MILESTONES = [
    (1, "First Successful Feeding", "physical", 91,
     "First latch or bottle feed. Baby is learning to coordinate sucking, swallowing and breathing."),
    (1, "First Meconium Diaper", "physical", 90,
     "The first dark, tarry stool is a healthy sign that digestion has started."),
    (1, "First Skin-to-Skin", "social", 89,
     "Skin-to-skin contact helps regulate temperature and heart rate and supports bonding."),
    (1, "Rooting Reflex Demonstrated", "physical", 88,
     "Baby turns toward a touch on the cheek and opens their mouth, ready to feed."),
    (2, "Weight Check Milestone", "health", 86,
     "Most newborns lose a little weight in the first days; your care team will track it."),
    (2, "Recognition of Parent's Voice", "cognitive", 84,
     "Baby may turn toward the voices they heard most before birth."),
    (2, "Startle Reflex to Sounds", "physical", 83,
     "Sudden noises make baby fling out their arms. This reflex is expected."),
    (3, "First Alert Period", "cognitive", 87,
     "Short stretches of quiet alertness are great moments for eye contact."),
    (3, "Umbilical Cord Care Milestone", "health", 86,
     "Keep the cord stump clean and dry until it falls off on its own."),
    (4, "Beginning Head Control", "physical", 85,
     "Brief attempts to lift or turn the head during tummy time or on a shoulder."),
    (4, "First Sustained Gaze", "cognitive", 84,
     "Baby holds your gaze for a few seconds at close range."),
    (5, "First Focus on Faces", "cognitive", 86,
     "Faces are baby's favorite thing to look at, especially around 8-12 inches away."),
    (5, "Calms to Parent's Voice", "social", 84,
     "Talking or singing softly can settle baby when they are fussy."),
    (6, "First Tracking of Objects", "cognitive", 85,
     "Baby briefly follows a slowly moving face or high-contrast object."),
    (6, "First Voluntary Grasp", "physical", 83,
     "Fingers curl around yours with growing intent."),
    (7, "First Week Complete", "self_care", 90,
     "One week together. Feeding, sleeping and diapering are becoming familiar routines."),
    (7, "Week One Weight Check", "health", 88,
     "Many babies are on their way back to birth weight by now."),
    (7, "Newborn Screening Results", "health", 86,
     "Results from the newborn screening are usually shared around this time."),
    (8, "First Distinctions Between Cries", "language", 85,
     "You may start to tell hungry, tired and uncomfortable cries apart."),
    (9, "First Preference for Human Faces", "social", 86,
     "Baby looks longer at faces than at objects."),
    (10, "First Deliberate Hand Movements", "physical", 84,
     "Arm and hand movements become a little less jerky."),
    (11, "Calms When Held", "social", 85,
     "Being picked up and held close is often enough to settle baby."),
    (12, "Brief Head Lifting During Tummy Time", "physical", 86,
     "Short lifts of the head while lying on the tummy build neck strength."),
    (13, "Beginning of Social Smile", "social", 87,
     "Fleeting smiles may start to appear in response to your face or voice."),
    (14, "Two-Week Pediatrician Visit", "health", 90,
     "The two-week visit checks weight gain, feeding and overall health."),
    (14, "First Potential Social Smile", "social", 88,
     "Watch for a smile that seems to be meant just for you."),
]

# (week, title, type, priority, description)
WEEK_MILESTONES = [
    (1, "More Alert and Responsive", "cognitive", 82,
     "Awake periods are getting a little longer and more interactive."),
    (2, "First Social Smile", "social", 85,
     "Smiles in response to people, not only during sleep."),
    (3, "Cooing Begins", "language", 83,
     "Soft vowel sounds are baby's first conversations."),
    (4, "Facial Recognition Improves", "cognitive", 84,
     "Baby recognizes familiar faces and may light up when they see you."),
    (5, "Social Smiling Increases", "social", 86,
     "Smiles come more often and more easily."),
    (6, "Holds Head Up During Tummy Time", "physical", 84,
     "Baby can lift and hold their head up briefly while on their tummy."),
    (7, "First Laugh", "social", 86,
     "Some babies share their first giggle around now."),
    (8, "Coos and Makes Sounds", "language", 85,
     "Baby takes turns making sounds with you."),
    (9, "Early Babbling Starts", "language", 86,
     "Strings of sounds start to appear during play."),
    (10, "Brings Hands Together", "physical", 81,
     "Hands meet in the middle of the body and often head to the mouth."),
    (11, "Responsive Laughing", "social", 86,
     "Baby laughs in response to play and silly faces."),
    (12, "Reaches for Objects", "physical", 84,
     "Baby swipes or reaches toward toys within reach."),
]


def _milestone_props(label: str, title: str, kind: str, description: str, day: int | None) -> dict[str, Any]:
    props: dict[str, Any] = {
        "ageLabel": label,
        "description": description,
        "title": title,
        "type": kind,
    }
    if day is not None:
        props["suggestedDay"] = day
    return props


def create_milestones_program(ai: Any = None) -> Program:
    P = Program()

    for day, title, kind, priority, description in DAY_MILESTONES:
        P.add(
            P.rule()
            .slot(Screen.MILESTONES, Slot.HEADER)
            .when(scope(Scope.POSTPARTUM), postpartum.day.eq(day))
            .show("Card.Milestone", _milestone_props(f"Day {day}", title, kind, description, day))
            .priority(priority)
            .build()
        )

    for week, title, kind, priority, description in WEEK_MILESTONES:
        P.add(
            P.rule()
            .slot(Screen.MILESTONES, Slot.HEADER)
            .when(scope(Scope.POSTPARTUM), postpartum.week.eq(week))
            .show("Card.Milestone", _milestone_props(f"Week {week}", title, kind, description, None))
            .priority(priority)
            .build()
        )

    return P
