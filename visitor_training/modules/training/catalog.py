"""
Fixed training content: the ordered video segments and the quiz.

The sequence and the questions are the same for every visitor, so they are
plain module data rather than store documents.
"""

from typing import List

from visitor_training.core.schemas.training import QuestionData, TrainingContentResponse, VideoSegment

VIDEO_SEGMENTS: List[VideoSegment] = [
    VideoSegment(
        title="Introduction to Workplace Safety",
        videoFile="/videos/safety-1.mov",
        imgFile="/img/safety-img-1.png",
        description="Learn the fundamentals of workplace safety",
        estimatedDuration=11,
    ),
    VideoSegment(
        title="Personal Protective Equipment",
        videoFile="/videos/safety-2.mov",
        imgFile="/img/safety-img-2.png",
        description="Proper use and maintenance of PPE",
        estimatedDuration=45,
    ),
    VideoSegment(
        title="Emergency Procedures",
        videoFile="/videos/safety-3.mov",
        imgFile="/img/safety-img-3.png",
        description="What to do in case of workplace emergencies",
        estimatedDuration=41,
    ),
    VideoSegment(
        title="Hazard Identification",
        videoFile="/videos/safety-4.mov",
        imgFile="/img/safety-img-4.png",
        description="How to identify and report workplace hazards",
        estimatedDuration=24,
    ),
    VideoSegment(
        title="Safe Work Practices",
        videoFile="/videos/safety-5.mov",
        imgFile="/img/safety-img-5.png",
        description="Daily practices for maintaining safety",
        estimatedDuration=27,
    ),
    VideoSegment(
        title="Chemical Safety",
        videoFile="/videos/safety-6.mov",
        imgFile="/img/safety-img-6.png",
        description="Handling and storage of hazardous materials",
        estimatedDuration=36,
    ),
    VideoSegment(
        title="Equipment Operation",
        videoFile="/videos/safety-7.mov",
        imgFile="/img/safety-img-7.png",
        description="Safe operation of workplace equipment",
        estimatedDuration=20,
    ),
    VideoSegment(
        title="Safety Compliance",
        videoFile="/videos/safety-8.mov",
        imgFile="/img/safety-img-8.png",
        description="Understanding safety regulations and compliance",
        estimatedDuration=17,
    ),
]

QUESTIONS: List[QuestionData] = [
    QuestionData(
        question="What is the site speed limit?",
        options=["10 km/h", "20 km/h", "15 km/h"],
        correctAnswer=2,
    ),
    QuestionData(
        question="Smoking is permitted inside the production area",
        options=["True", "False"],
        correctAnswer=0,
    ),
    QuestionData(
        question="Assembly area is located near to gate #1",
        options=["True", "False"],
        correctAnswer=1,
    ),
    QuestionData(
        question="Visitor badge must be kept visible at all times",
        options=["True", "False"],
        correctAnswer=0,
    ),
    QuestionData(
        question="Wearing a watch inside the plant and intervention with moving machinery are permitted.",
        options=["True", "False"],
        correctAnswer=1,
    ),
    QuestionData(
        question="When entering a high care area, you must:",
        options=["Sanitize your hands", "Wear hair net", "Both", "None of the above"],
        correctAnswer=2,
    ),
]


def get_training_content() -> TrainingContentResponse:
    return TrainingContentResponse(
        segments=[segment.model_copy() for segment in VIDEO_SEGMENTS],
        questions=[question.model_copy() for question in QUESTIONS],
    )
