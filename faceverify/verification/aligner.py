import cv2
from .geometry import AlignmentTransform
from .types import Frame


def align_frame(frame: Frame, transform: AlignmentTransform) -> Frame:
    """
    Warp the whole frame so the eyes are level and D_target apart.
    Output keeps the input size and layout; uncovered pixels are black.
    """
    aligned = cv2.warpAffine(
        frame.pixels,
        transform.matrix(),
        (frame.width, frame.height),
        flags=cv2.INTER_LINEAR,
        borderMode=cv2.BORDER_CONSTANT,
        borderValue=(0, 0, 0, 0),
    )
    return Frame(pixels=aligned, layout=frame.layout)
