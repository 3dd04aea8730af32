"""
Built-in records: the placement exam, plus optional demo content.
"""

from typing import List

from cogni.domain.content import Content, ContentKind
from cogni.domain.exam import PLACEMENT_CONTENT_ID, PLACEMENT_EXAM_ID, Exam, Question, QuestionKind


def placement_exam() -> Exam:
    return Exam(
        id=PLACEMENT_EXAM_ID,
        content_id=PLACEMENT_CONTENT_ID,
        title="آزمون تعیین سطح شناختی اولیه",
        time_limit=20,
        questions=[
            Question(
                id="p1",
                text="کدام یک از مهارت‌های زیر در حل مسائل پیچیده نقش کلیدی دارد؟",
                kind=QuestionKind.MCQ,
                options=["تفکر انتقادی", "حافظه کوتاه‌مدت", "سرعت تایپ", "قدرت بدنی"],
                correct_option=0,
            ),
            Question(
                id="p2",
                text="توضیح دهید چگونه مدیریت زمان می‌تواند بر کاهش استرس شناختی موثر باشد؟",
                kind=QuestionKind.DESCRIPTIVE,
            ),
        ],
    )


def demo_contents() -> List[Content]:
    return [
        Content(
            id="c1",
            title="اصول حافظه فعال",
            description="آشنایی با مکانیزم‌های ذخیره‌سازی اطلاعات در مغز.",
            kind=ContentKind.TEXT,
            min_level=1,
            max_level=3,
            duration_minutes=15,
            author_id="t1",
            body="حافظه فعال یکی از حیاتی‌ترین بخش‌های سیستم شناختی انسان است...",
        ),
        Content(
            id="c2",
            title="تمرکز حواس در محیط کار",
            description="چگونه تمرکز خود را در محیط‌های شلوغ حفظ کنیم؟",
            kind=ContentKind.VIDEO,
            min_level=2,
            max_level=5,
            duration_minutes=10,
            author_id="t1",
            video_url="https://sample-videos.com/video123/mp4/720/big_buck_bunny_720p_1mb.mp4",
        ),
    ]


def demo_exams() -> List[Exam]:
    return [
        Exam(
            id="e1",
            content_id="c1",
            title="کوییز اصول حافظه فعال",
            time_limit=10,
            questions=[
                Question(
                    id="q1",
                    text="ظرفیت متوسط حافظه فعال چند واحد است؟",
                    kind=QuestionKind.MCQ,
                    options=["۳", "۷", "۱۲", "۲۰"],
                    correct_option=1,
                ),
            ],
        ),
    ]
