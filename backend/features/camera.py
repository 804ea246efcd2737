"""
Camera frame analysis.

``solver`` mode returns a full derivation; ``teacher`` mode only names
the concept, gives a hint and points out mistakes.
"""

from backend.llm_router import GenerationRequest, InlineDataPart, TextPart
from backend.llm_router.response_schema import STRING, array_of, object_of
from backend.models import CameraAnalysisResult, CameraMode
from configs import get_feature_prompt

from .base import FeatureRunner

CAMERA_SCHEMA = object_of(
    solvedEquation=STRING,
    steps=array_of(STRING),
    hint=STRING,
    errorDetected=STRING,
    rawTextResponse=STRING,
)


async def analyze_frame(
    runner: FeatureRunner, base64_data: str, mode: CameraMode = CameraMode.SOLVER
) -> CameraAnalysisResult:
    prompt_name = "camera_solver" if CameraMode(mode) is CameraMode.SOLVER else "camera_teacher"
    request = GenerationRequest.single_turn(
        [InlineDataPart(mime_type="image/jpeg", data=base64_data), TextPart(get_feature_prompt(prompt_name))],
        response_schema=CAMERA_SCHEMA,
    )
    return await runner.generate_structured(request, CameraAnalysisResult)
