"""Prompt templates for exam question generation."""

from .models import GenerationRequest

SYSTEM_PROMPT = """You are an expert academic question generator. You write exam-ready questions and model answers from the study material you are given.

1. EXACT COUNTS
   - Generate EXACTLY the number of questions requested for every category.
   - If asked for 6 easy, 6 medium and 6 hard questions, return exactly 6 of each.
   - Never return fewer or more questions than requested.

2. DIFFICULTY, MARKS AND BLOOM'S TAXONOMY (STRICT MAPPING)
   - EASY = 2 marks ("TWO"), Bloom's REMEMBER or UNDERSTAND only.
     Define, list, name, state, explain briefly. Answer: 3-4 key points, 30-50 words.
   - MEDIUM = 8 marks ("EIGHT"), Bloom's APPLY or ANALYZE only.
     Compare, contrast, analyze, apply, demonstrate, calculate. Answer: 5-6 key points, 100-120 words.
   - HARD = 16 marks ("SIXTEEN"), Bloom's EVALUATE or CREATE only.
     Evaluate, design, justify, assess, propose. Answer: 6-8 key points with context, 200-250 words.

3. QUESTION TYPES
   - DIRECT: definitions, explanations, lists, identification.
   - INDIRECT: relationships, differences, why something matters in a context.
   - SCENARIO_BASED: real-world situations and case studies.
   - PROBLEM_BASED: calculations, design tasks, troubleshooting.

4. ANSWER FORMAT
   - Key points, one sentence each, separated by periods.
   - Plain text only: no markdown, no asterisks, no headings, no code blocks.
   - No placeholders such as "[Answer here]" and no generic filler.

5. CONTENT
   - Base every question strictly on the provided material and its terminology.
   - Cover different topics; never repeat a question.
   - Every question must be answerable from the material alone.

6. RESPONSE FORMAT
   Respond with ONLY one JSON object. No text before or after it, no code fences:

   {
     "questions": [
       {
         "question_text": "Define protocol in data communication. (2 Marks)",
         "answer_text": "A protocol is a set of communication rules. It specifies the data format. It ensures reliable transmission. Examples are HTTP and TCP/IP.",
         "difficulty_level": "EASY",
         "bloom_level": "REMEMBER",
         "bloom_justification": "Requires recalling a definition.",
         "question_type": "DIRECT",
         "marks": "TWO",
         "unit_number": 1,
         "course_name": "Computer Networks",
         "material_name": "Unit 1"
       }
     ]
   }

   Include every field for every question and put the marks in the question text, e.g. "(8 Marks)"."""


def _exact(count: int) -> str:
    return f"EXACTLY {count}" if count else "ZERO"


def build_question_prompt(request: GenerationRequest, content: str) -> str:
    """Build the user prompt for one chunk of material.

    Every quota axis is spelled out with exact-count wording; the backend is
    expected to reconcile difficulty, Bloom and type counts into single
    questions using the fixed difficulty-to-Bloom mapping.

    Args:
        request: Request carrying labels and the quotas for this chunk
        content: Chunk text the questions must be drawn from

    Returns:
        Prompt text
    """
    difficulty = request.question_counts
    bloom = request.bloom_levels
    types = request.question_types
    total = difficulty.total

    return f"""COURSE: {request.course_name}
MATERIAL: {request.material_name}
UNIT: {request.unit}

== EXAM GENERATION TASK ==

Generate {total} exam questions based STRICTLY on the course material below.

== MANDATORY EXACT COUNTS ==

1. DIFFICULTY (TOTAL {total} = EASY {difficulty.easy} + MEDIUM {difficulty.medium} + HARD {difficulty.hard}):
   - EASY: {_exact(difficulty.easy)} questions, marks "TWO", Bloom's REMEMBER or UNDERSTAND
   - MEDIUM: {_exact(difficulty.medium)} questions, marks "EIGHT", Bloom's APPLY or ANALYZE
   - HARD: {_exact(difficulty.hard)} questions, marks "SIXTEEN", Bloom's EVALUATE or CREATE

2. BLOOM'S TAXONOMY LEVELS:
   - REMEMBER: {bloom.remember} (EASY)
   - UNDERSTAND: {bloom.understand} (EASY)
   - APPLY: {bloom.apply} (MEDIUM)
   - ANALYZE: {bloom.analyze} (MEDIUM)
   - EVALUATE: {bloom.evaluate} (HARD)
   - CREATE: {bloom.create} (HARD)

3. QUESTION TYPES:
   - DIRECT: {_exact(types.direct)}
   - INDIRECT: {_exact(types.indirect)}
   - SCENARIO_BASED: {_exact(types.scenario_based)}
   - PROBLEM_BASED: {_exact(types.problem_based)}

Do NOT generate fewer or more than {total} questions. If a category says ZERO, generate none of it.

==================== COURSE MATERIAL STARTS ====================
{content}
==================== COURSE MATERIAL ENDS ====================

Return ONLY the JSON object described in your instructions. Use unit_number {request.unit}, course_name "{request.course_name}" and material_name "{request.material_name}" for every question. Start the response with {{ and end it with }}."""
