"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

utils/convert_utils.py
Size conversions for CLI input and output.
"""

_UNITS = {
    'PB': 1024 ** 5, 'P': 1024 ** 5,
    'TB': 1024 ** 4, 'T': 1024 ** 4,
    'GB': 1024 ** 3, 'G': 1024 ** 3,
    'MB': 1024 ** 2, 'M': 1024 ** 2,
    'KB': 1024, 'K': 1024,
    'B': 1,
}


class ConvertUtils:
    @staticmethod
    def bytes_to_human(size_bytes: int) -> str:
        """
        Convert bytes to human-readable string (e.g., 512B, 1.50KB, 3.20MB).
        """
        if size_bytes < 1024:
            return f"{max(size_bytes, 0)}B"

        value = float(size_bytes)
        for unit in ["KB", "MB", "GB", "TB", "PB"]:
            value /= 1024
            if value < 1024:
                return f"{value:.2f}{unit}"
        return f"{value / 1024:.2f}EB"

    @staticmethod
    def human_to_bytes(size_str: str) -> int:
        """
        Convert human-readable size string to bytes.
        Supports formats: '1.5GB', '64KB', '1000', '1K', '1M', etc.
        Raises ValueError for negative sizes or invalid formats.
        """
        text = size_str.strip().upper()

        # Longest suffix first so 'KB' is not read as 'K' + 'B'
        for unit in sorted(_UNITS, key=len, reverse=True):
            if text.endswith(unit):
                number = text[:-len(unit)].strip()
                multiplier = _UNITS[unit]
                break
        else:
            number, multiplier = text, 1

        try:
            value = float(number) if multiplier > 1 else int(number)
        except ValueError:
            raise ValueError(
                f"Invalid size format: '{size_str}'. "
                f"Supported formats: 1.5GB, 64KB, 1000, 1K, 1M, etc."
            )

        if value < 0:
            raise ValueError(f"Negative size not allowed: '{size_str}'")
        return int(value * multiplier)
