from enum import Enum


class ViewerKind(str, Enum):
    image = "image"
    video = "video"
    audio = "audio"
    pdf = "pdf"
    other = "other"
