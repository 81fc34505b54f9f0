"""
Command line for the external video encoder.

Frames arrive on stdin as a stream of PNG images; the encoder either writes
the output file itself or streams WebM to stdout.
"""

from typing import List, Optional


def build_ffmpeg_args(fps: int, output_path: Optional[str] = None, codec: str = 'libvpx-vp9',
                      bitrate: str = '4M', binary: Optional[str] = None) -> List[str]:
    args = [
        '-y',
        '-f', 'image2pipe',
        '-r', str(fps),
        '-i', '-',
        '-c:v', codec,
        '-b:v', bitrate,
        # keep the alpha channel
        '-pix_fmt', 'yuva420p',
        '-auto-alt-ref', '0',
    ]
    if output_path:
        args.append(str(output_path))
    else:
        args.extend(['-f', 'webm', 'pipe:1'])
    if binary:
        args.insert(0, binary)
    return args
