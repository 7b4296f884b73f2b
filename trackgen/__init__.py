from .audio import decode_wav, encode_wav
from .errors import EncodingError, InvalidParameter, TrackGenError
from .generators import generate_drum_beat, generate_tone
from .models import EncodedAudioBlob, SampleBuffer, TrackKind, Waveform
from .repositories import SAMPLE_TRACKS
from .services import TrackService, generate_sample_track

__all__ = [
    "decode_wav",
    "encode_wav",
    "EncodingError",
    "InvalidParameter",
    "TrackGenError",
    "generate_drum_beat",
    "generate_tone",
    "EncodedAudioBlob",
    "SampleBuffer",
    "TrackKind",
    "Waveform",
    "SAMPLE_TRACKS",
    "TrackService",
    "generate_sample_track",
]
