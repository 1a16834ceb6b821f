import logging
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

import exifread
from PIL import Image
from pymediainfo import MediaInfo

from .. import config

DATE_TAGS = [
    'EXIF DateTimeOriginal',
    'EXIF DateTimeDigitized',
    'Image DateTime',
]


@dataclass
class FileDetails:
    """What the review prompt shows about a single file."""
    path: Path
    size_bytes: int
    modified: datetime
    created: Optional[datetime] = None
    media_type: str = "Unknown"
    capture_datetime: Optional[datetime] = None
    camera_model: Optional[str] = None
    width: Optional[int] = None
    height: Optional[int] = None
    duration_sec: Optional[float] = None

    def lines(self) -> List[str]:
        out = [
            f"File info for {self.path}",
            f"Size: {self.size_bytes} bytes",
        ]
        if self.created:
            out.append(f"Created: {self.created:%Y-%m-%d %H:%M:%S}")
        out.append(f"Modified: {self.modified:%Y-%m-%d %H:%M:%S}")
        out.append(f"Media Type: {self.media_type}")
        if self.capture_datetime:
            out.append(f"Captured: {self.capture_datetime:%Y-%m-%d %H:%M:%S}")
        if self.camera_model:
            out.append(f"Camera: {self.camera_model}")
        if self.width and self.height:
            out.append(f"Dimensions: {self.width}x{self.height}")
        if self.duration_sec is not None:
            out.append(f"Duration: {self.duration_sec:.1f}s")
        return out


class MetadataExtractor:
    """
    Collects file details for display during review.

    Strategies:
      - Filesystem: size and timestamps via stat.
      - Photos: 'exifread' for capture date/camera, Pillow for dimensions.
      - Video: 'pymediainfo' for duration and recorded date.
    Anything a library cannot parse is left empty; only stat failures raise.
    """

    def inspect(self, path: Path) -> FileDetails:
        st = path.stat()
        # st_birthtime exists on macOS/BSD only
        birth = getattr(st, "st_birthtime", None)

        category = config.EXT_TO_CATEGORY.get(path.suffix.lower())
        details = FileDetails(
            path=path,
            size_bytes=st.st_size,
            modified=datetime.fromtimestamp(st.st_mtime),
            created=datetime.fromtimestamp(birth) if birth else None,
            media_type=category.capitalize() if category else "Unknown",
        )

        if category == 'photo':
            details.capture_datetime, details.camera_model = self.get_image_metadata(path)
            details.width, details.height = self.get_image_dimensions(path)
        elif category == 'video':
            details.capture_datetime, details.duration_sec = self.get_video_metadata(path)

        return details

    def get_image_metadata(self, path: Path) -> Tuple[Optional[datetime], Optional[str]]:
        """Returns (capture_datetime, camera_model) from EXIF tags."""
        try:
            with path.open('rb') as f:
                # details=False speeds up processing significantly
                tags = exifread.process_file(f, details=False)
        except Exception as e:
            logging.debug(f"ExifRead failed for {path}: {e}")
            return None, None

        camera = None
        if 'Image Model' in tags:
            camera = str(tags['Image Model']).strip() or None
        return self._parse_exif_date(tags), camera

    def get_image_dimensions(self, path: Path) -> Tuple[Optional[int], Optional[int]]:
        try:
            with Image.open(path) as img:
                return img.size
        except Exception as e:
            # RAW and HEIC files are usually not readable by Pillow
            logging.debug(f"Pillow could not open {path}: {e}")
            return None, None

    def get_video_metadata(self, path: Path) -> Tuple[Optional[datetime], Optional[float]]:
        """Returns (capture_datetime, duration_sec)."""
        try:
            data = self._extract_mediainfo(path)
        except Exception as e:
            logging.debug(f"MediaInfo failed for {path}: {e}")
            return None, None
        return data['dt'], data['duration']

    def _extract_mediainfo(self, path: Path) -> Dict[str, Any]:
        mi = MediaInfo.parse(str(path))
        data: Dict[str, Any] = {'dt': None, 'duration': None}

        for track in mi.tracks:
            if track.track_type != "General":
                continue
            if getattr(track, "duration", None):
                # MediaInfo duration is in milliseconds
                data['duration'] = float(track.duration) / 1000.0
            for attr in ("recorded_date", "encoded_date", "tagged_date"):
                val = getattr(track, attr, None)
                if val:
                    dt = self._parse_flexible_date(str(val))
                    if dt:
                        data['dt'] = dt
                        break
        return data

    def _parse_exif_date(self, tags) -> Optional[datetime]:
        for tag in DATE_TAGS:
            if tag in tags:
                try:
                    # EXIF format is usually "YYYY:MM:DD HH:MM:SS"
                    dt_str = str(tags[tag]).replace(':', '-', 2)
                    return datetime.strptime(dt_str, "%Y-%m-%d %H:%M:%S")
                except ValueError:
                    continue
        return None

    def _parse_flexible_date(self, dt_str: str) -> Optional[datetime]:
        clean = dt_str.replace("UTC", "").strip()
        try:
            return datetime.fromisoformat(clean)
        except ValueError:
            pass
        try:
            clean_exif = clean.replace(":", "-", 2).split(".")[0]
            return datetime.strptime(clean_exif, "%Y-%m-%d %H:%M:%S")
        except ValueError:
            return None
