"""
Vision wellness scoring.

Combines three independent measurements into the Vision Wellness topic:
an eyeglass prescription, a Snellen visual-acuity reading test and the
12-item OSDI (Ocular Surface Disease Index) questionnaire.
"""
import re
from typing import Dict, List, Optional, Sequence

from pydantic import BaseModel, Field

from scoring.normalizers import in_range, less_is_better, parse_number
from scoring.questions import VISION_WELLNESS

PRESCRIPTION_TOPIC = f"{VISION_WELLNESS}: Prescription"
ACUITY_TOPIC = f"{VISION_WELLNESS}: Acuity"
OSDI_TOPIC = f"{VISION_WELLNESS}: OSDI"

PASS_ACCURACY = 0.8


class EyeValues(BaseModel):
    sph: str = ""
    cyl: str = ""
    axis: str = ""
    add: str = ""


class Prescription(BaseModel):
    """Right eye (O.D.), left eye (O.S.) and pupillary distance."""
    od: EyeValues = Field(default_factory=EyeValues)
    os: EyeValues = Field(default_factory=EyeValues)
    pd: str = ""


class SnellenLine(BaseModel):
    label: str
    letters: str
    font_size: float


SNELLEN: List[SnellenLine] = [
    SnellenLine(label="20/160", letters="EKA", font_size=38.4),
    SnellenLine(label="20/125", letters="CZHS", font_size=32),
    SnellenLine(label="20/100", letters="KSRNH", font_size=27.2),
    SnellenLine(label="20/80", letters="DVKHCR", font_size=23.2),
    SnellenLine(label="20/60", letters="NSDVCHO", font_size=20),
    SnellenLine(label="20/50", letters="DCNKOHRS", font_size=17.6),
    SnellenLine(label="20/40", letters="HUDKSCRONV", font_size=15.2),
    SnellenLine(label="20/30", letters="OAHVZCKLDBSR", font_size=12.8),
    SnellenLine(label="20/25", letters="NVGRBHOEAKCMPS", font_size=11.2),
    SnellenLine(label="20/20", letters="PKVNTNUHARXMBJEDCIO", font_size=9.6),
    SnellenLine(label="20/16", letters="JXRAPMWYOFCHGVSNLUTKD", font_size=8),
]

OSDI_QUESTIONS: List[str] = [
    "Have you experienced eyes that are sensitive to light during the last week?",
    "Have you experienced eyes that feel gritty during the last week?",
    "Have you experienced painful or sore eyes during the last week?",
    "Have you experienced blurred vision during the last week?",
    "Have you experienced poor vision during the last week?",
    "Have you had any vision problems when reading (non-digital) in the past week?",
    "Have you had any vision problems when driving at night in the past week?",
    "Have you had any vision problems when working with a computer or bank machine (ATM) in the past week?",
    "Have you had any vision problems when watching TV in the past week?",
    "Have your eyes felt uncomfortable in windy areas?",
    "Have your eyes felt uncomfortable in places with low humidity (very dry)?",
    "Have your eyes felt uncomfortable in areas that had air conditioning?",
]


def _optional_number(value: str) -> Optional[float]:
    if value is None or str(value).strip() == "":
        return None
    return parse_number(value)


def score_prescription(rx: Prescription) -> float:
    """
    Score a prescription; smaller corrections score higher.

    Sphere and cylinder only count when both eyes are present. PD scores
    full credit inside the typical 60-66 mm band.
    """
    sph_od, sph_os = _optional_number(rx.od.sph), _optional_number(rx.os.sph)
    cyl_od, cyl_os = _optional_number(rx.od.cyl), _optional_number(rx.os.cyl)
    pd = _optional_number(rx.pd)

    parts: List[float] = []
    if sph_od is not None and sph_os is not None:
        parts.append((less_is_better(abs(sph_od), 1) + less_is_better(abs(sph_os), 1)) / 2)
    if cyl_od is not None and cyl_os is not None:
        parts.append((less_is_better(abs(cyl_od), 0.75) + less_is_better(abs(cyl_os), 0.75)) / 2)
    if pd is not None:
        parts.append(in_range(pd, 60, 66))
    if not parts:
        return 0.0
    return max(0.0, min(1.0, sum(parts) / len(parts)))


def line_to_decimal(label: str) -> float:
    """Snellen fraction to decimal acuity, capped at 1 (20/16 -> 1.0)."""
    match = re.search(r"20/(\d+)", label or "")
    if not match:
        return 0.0
    denominator = int(match.group(1))
    if denominator <= 0:
        return 0.0
    return min(1.0, 20 / denominator)


def sanitize_letters(text: str) -> str:
    return re.sub(r"[^A-Z]", "", (text or "").upper())


class LetterComparison(BaseModel):
    correct: int
    total: int
    accuracy: float


def compare_letters(typed: str, target: str) -> LetterComparison:
    """Position-by-position comparison on A-Z only."""
    a = sanitize_letters(typed)
    b = sanitize_letters(target)
    correct = sum(1 for x, y in zip(a, b) if x == y)
    total = len(b)
    return LetterComparison(correct=correct, total=total, accuracy=correct / total if total else 0.0)


_SPOKEN_LETTERS: Dict[str, str] = {
    "alpha": "A", "alfa": "A", "a": "A",
    "bravo": "B", "b": "B", "bee": "B", "be": "B",
    "charlie": "C", "c": "C", "sea": "C", "see": "C", "cee": "C",
    "delta": "D", "d": "D", "dee": "D",
    "echo": "E", "e": "E",
    "foxtrot": "F", "f": "F", "eff": "F",
    "golf": "G", "g": "G", "gee": "G",
    "hotel": "H", "h": "H", "aitch": "H",
    "india": "I", "i": "I", "eye": "I",
    "juliet": "J", "juliett": "J", "j": "J", "jay": "J",
    "kilo": "K", "k": "K", "kay": "K",
    "lima": "L", "l": "L", "el": "L",
    "mike": "M", "m": "M", "em": "M",
    "november": "N", "n": "N", "en": "N",
    "oscar": "O", "o": "O", "oh": "O", "owe": "O",
    "papa": "P", "p": "P", "pee": "P",
    "quebec": "Q", "q": "Q", "cue": "Q", "queue": "Q",
    "romeo": "R", "r": "R", "ar": "R", "are": "R",
    "sierra": "S", "s": "S", "ess": "S",
    "tango": "T", "t": "T", "tee": "T", "tea": "T",
    "uniform": "U", "u": "U", "you": "U",
    "victor": "V", "v": "V", "vee": "V",
    "whiskey": "W", "whisky": "W", "w": "W", "doubleu": "W",
    "xray": "X", "x": "X", "ex": "X",
    "yankee": "Y", "y": "Y", "why": "Y",
    "zulu": "Z", "z": "Z", "zee": "Z", "zed": "Z",
}


def decode_spoken_letters(transcript: str) -> str:
    """
    Convert a speech transcript ("kilo es ay") into chart letters.

    Unknown words are kept as their own letters, so "KSR" spoken as one
    token still decodes to "KSR".
    """
    text = (transcript or "").lower()
    text = re.sub(r"\bx[ -]ray\b", "xray", text)
    text = re.sub(r"\bdouble u\b", "doubleu", text)
    out = []
    for token in text.split():
        word = re.sub(r"[^a-z]", "", token)
        if not word:
            continue
        out.append(_SPOKEN_LETTERS.get(word, word.upper()))
    return sanitize_letters("".join(out))


class LineReading(BaseModel):
    """What the user read for one chart line, typed or spoken."""
    line: str
    letters: str = ""
    transcript: Optional[str] = None


class AcuityResult(BaseModel):
    best_line: Optional[str] = None
    letters_correct: int = 0
    letters_total: int = 0
    score: float = 0.0
    lines: List[str] = Field(default_factory=list)


def _line_index(label: str) -> Optional[int]:
    for idx, line in enumerate(SNELLEN):
        if line.label == label:
            return idx
    return None


def grade_acuity(readings: Sequence[LineReading]) -> AcuityResult:
    """
    Grade a sequence of chart readings.

    A line passes at 80% letter accuracy; the acuity score is the decimal
    acuity of the smallest line passed. Readings for unknown lines are ignored.
    """
    best: Optional[int] = None
    correct = 0
    total = 0
    messages: List[str] = []
    for reading in readings:
        idx = _line_index(reading.line)
        if idx is None:
            continue
        line = SNELLEN[idx]
        typed = decode_spoken_letters(reading.transcript) if reading.transcript else reading.letters
        result = compare_letters(typed, line.letters)
        correct += result.correct
        total += result.total
        passed = result.accuracy >= PASS_ACCURACY
        messages.append(f"{line.label}: {'pass' if passed else 'recorded'} ({round(result.accuracy * 100)}%)")
        if passed and (best is None or idx > best):
            best = idx
    best_label = SNELLEN[best].label if best is not None else None
    return AcuityResult(
        best_line=best_label,
        letters_correct=correct,
        letters_total=total,
        score=line_to_decimal(best_label) if best_label else 0.0,
        lines=messages,
    )


def score_osdi(answers: Sequence[Optional[int]]) -> float:
    """
    OSDI wellness: each answered item (1 = lowest, 8 = highest symptom load)
    contributes (9 - s) / 8; unanswered items are skipped.
    """
    present = [a for a in answers if a is not None]
    if not present:
        return 0.0
    wellness = [(9 - max(1, min(8, a))) / 8 for a in present]
    return max(0.0, min(1.0, sum(wellness) / len(wellness)))


class VisionScores(BaseModel):
    overall: float
    prescription: float
    acuity: float
    osdi: float
    acuity_detail: AcuityResult

    def as_topic_rows(self) -> List[Dict[str, float]]:
        """The four rows persisted for one vision test."""
        return [
            {"topic": VISION_WELLNESS, "score": self.overall},
            {"topic": PRESCRIPTION_TOPIC, "score": self.prescription},
            {"topic": ACUITY_TOPIC, "score": self.acuity},
            {"topic": OSDI_TOPIC, "score": self.osdi},
        ]


def evaluate_vision(
    prescription: Prescription,
    readings: Sequence[LineReading],
    osdi_answers: Sequence[Optional[int]],
) -> VisionScores:
    rx_score = score_prescription(prescription)
    acuity = grade_acuity(readings)
    osdi = score_osdi(osdi_answers)
    overall = max(0.0, min(1.0, (rx_score + acuity.score + osdi) / 3))
    return VisionScores(
        overall=overall,
        prescription=rx_score,
        acuity=acuity.score,
        osdi=osdi,
        acuity_detail=acuity,
    )
