"""Weather-driven farming advice for tobacco growers.

Thresholds follow common agronomy guidance for tobacco: 20-30°C, 60-80%
relative humidity and light rain (1-5 mm/h) are ideal. Messages are in
Indonesian because they are shown to growers as-is.
"""

from __future__ import annotations

from tobacco_watch.core.models import AdviceStatus, RecommendationResult

SEPARATOR = " | "

DEFAULT_PLANTING = "Evaluasi kondisi lebih lanjut sebelum penanaman"
DEFAULT_HARVEST = "Pantau perkembangan cuaca untuk menentukan waktu panen"
DEFAULT_DRYING = "Sesuaikan metode pengeringan dengan kondisi cuaca"
DEFAULT_IRRIGATION = "Lakukan irigasi sesuai kebutuhan tanaman"
DEFAULT_PEST = (
    "✅ Risiko hama dan penyakit dalam batas normal. Lakukan monitoring rutin"
)


def _temperature_note(temp: float) -> str:
    if 20 <= temp <= 30:
        return "✅ Suhu optimal untuk pertumbuhan tembakau (20-30°C)"
    if temp < 20:
        return "⚠️ Suhu terlalu dingin, pertumbuhan mungkin terhambat"
    return "⚠️ Suhu terlalu panas, tingkatkan irigasi"


def _humidity_note(humidity: int) -> str:
    if 60 <= humidity <= 80:
        return "✅ Kelembaban ideal untuk tembakau (60-80%)"
    if humidity < 60:
        return "⚠️ Kelembaban rendah, tingkatkan irigasi"
    return "⚠️ Kelembaban tinggi, risiko penyakit jamur meningkat"


def _rain_note(rain: float) -> str:
    if rain < 1:
        return "☀️ Cuaca kering, cocok untuk pengeringan daun tembakau"
    if rain < 5:
        return "🌦️ Hujan ringan, cocok untuk pertumbuhan"
    if rain < 10:
        return "🌧️ Hujan sedang, pastikan drainase baik"
    return "⛈️ Hujan lebat, tunda pemanenan, risiko busuk tinggi"


def recommend(temp: float, humidity: int, rain: float) -> str:
    """One-line summary: temperature, humidity and rain notes."""
    return SEPARATOR.join(
        [_temperature_note(temp), _humidity_note(humidity), _rain_note(rain)]
    )


def _overall(temp: float, humidity: int, rain: float) -> tuple[AdviceStatus, str]:
    optimal_temp = 20 <= temp <= 30
    optimal_humidity = 60 <= humidity <= 80
    optimal_rain = 1 <= rain < 5

    if optimal_temp and optimal_humidity and optimal_rain:
        return AdviceStatus.OPTIMAL, "🌟 Kondisi OPTIMAL untuk budidaya tembakau!"
    if optimal_temp or optimal_humidity:
        return AdviceStatus.GOOD, "✅ Kondisi BAIK untuk budidaya tembakau"
    if temp > 35 or humidity > 90 or rain > 15:
        return (
            AdviceStatus.NOT_RECOMMENDED,
            "❌ Kondisi TIDAK DISARANKAN untuk aktivitas pertanian",
        )
    return AdviceStatus.CAUTION, "⚠️ Kondisi CUKUP - perhatikan faktor risiko"


def _planting(temp: float) -> tuple[str, str]:
    """(detail, planting advice) by temperature band."""
    if temp < 15:
        return (
            "Suhu terlalu dingin (<15°C) - pertumbuhan sangat terhambat",
            "❌ TIDAK disarankan menanam. Tunggu suhu naik minimal 18°C",
        )
    if temp < 20:
        return (
            "Suhu sejuk (15-20°C) - pertumbuhan lambat",
            "⚠️ Penanaman dimungkinkan tapi pertumbuhan akan lambat",
        )
    if temp <= 30:
        return (
            "Suhu optimal (20-30°C) - pertumbuhan ideal",
            "✅ SANGAT COCOK untuk penanaman bibit baru",
        )
    if temp <= 35:
        return (
            "Suhu hangat (30-35°C) - perlu irigasi ekstra",
            "⚠️ Bisa menanam tapi pastikan irigasi mencukupi",
        )
    return (
        "Suhu sangat panas (>35°C) - stres tanaman tinggi",
        "❌ TIDAK disarankan menanam. Tanaman akan stres",
    )


def _irrigation(humidity: int) -> tuple[str, str, str]:
    """(detail, irrigation advice, pest warning) by humidity band."""
    if humidity < 40:
        return (
            "Kelembaban sangat rendah (<40%) - tanaman bisa layu",
            "💧 PENTING: Tingkatkan irigasi 2-3x sehari, gunakan mulsa",
            "",
        )
    if humidity < 60:
        return (
            "Kelembaban rendah (40-60%) - perlu irigasi rutin",
            "💧 Irigasi 1-2x sehari, pantau kondisi tanah",
            "",
        )
    if humidity <= 80:
        return (
            "Kelembaban ideal (60-80%) - kondisi sempurna",
            "✅ Irigasi normal sesuai jadwal standar",
            "",
        )
    if humidity <= 90:
        return (
            "Kelembaban tinggi (80-90%) - risiko penyakit jamur",
            "⚠️ Kurangi irigasi, pastikan drainase baik",
            "⚠️ PERINGATAN: Risiko penyakit jamur tinggi! Semprot fungisida "
            "preventif, tingkatkan sirkulasi udara",
        )
    return (
        "Kelembaban sangat tinggi (>90%) - bahaya penyakit",
        "❌ STOP irigasi, perbaiki drainase segera",
        "🚨 BAHAYA: Risiko penyakit jamur sangat tinggi! Aplikasi fungisida "
        "darurat, cek tanaman busuk",
    )


def _harvest(rain: float) -> tuple[str, str, str]:
    """(detail, harvest advice, drying advice) by rainfall band."""
    if rain < 0.5:
        return (
            "Cuaca kering - ideal untuk pengeringan",
            "✅ SANGAT COCOK untuk panen dan pengeringan daun",
            "☀️ Kondisi SEMPURNA untuk penjemuran tembakau. Maksimalkan "
            "pengeringan hari ini!",
        )
    if rain < 2:
        return (
            "Hujan ringan - aman untuk pertumbuhan",
            "✅ Bisa panen pagi hari sebelum hujan",
            "⚠️ Penjemuran bisa dilakukan dengan pengawasan ketat",
        )
    if rain < 5:
        return (
            "Hujan sedang - baik untuk vegetatif",
            "⚠️ Tunda panen jika memungkinkan, atau panen cepat sebelum hujan lebat",
            "❌ Tidak disarankan menjemur hari ini. Gunakan pengering mekanis "
            "jika mendesak",
        )
    if rain < 10:
        return (
            "Hujan lebat - pastikan drainase baik",
            "❌ TUNDA panen! Daun basah tidak layak dipanen",
            "❌ STOP penjemuran. Pindahkan tembakau ke tempat kering",
        )
    return (
        "Hujan sangat lebat - risiko genangan",
        "❌ JANGAN panen. Cek kondisi tanaman setelah hujan reda",
        "❌ Penjemuran tidak memungkinkan. Pastikan gudang kering dan "
        "ventilasi baik",
    )


def advanced_recommendation(
    temp: float, humidity: int, rain: float, region: str
) -> RecommendationResult:
    """Detailed advice for planting, irrigation, harvest, drying and pests."""
    status, main_advice = _overall(temp, humidity, rain)
    temp_detail, planting = _planting(temp)
    humidity_detail, irrigation, pest = _irrigation(humidity)
    rain_detail, harvest, drying = _harvest(rain)

    if rain >= 10 and not pest:
        pest = "⚠️ Cek tanaman setelah hujan reda - risiko busuk batang dan akar tinggi"

    if 25 <= temp <= 32 and rain < 1 and humidity < 75:
        harvest = (
            "🌟 KONDISI PANEN SEMPURNA! Suhu, kelembaban, dan cuaca mendukung"
        )

    if not pest:
        if humidity > 80 and temp > 25:
            pest = (
                "🚨 Kombinasi panas + lembab: Risiko tinggi embun tepung, busuk "
                "daun, dan serangan ulat"
            )
        elif temp < 18 and rain > 5:
            pest = "⚠️ Kondisi dingin + basah: Waspadai penyakit busuk akar dan batang"

    return RecommendationResult(
        status=status,
        main_advice=main_advice,
        detailed_advice=[temp_detail, humidity_detail, rain_detail],
        planting_advice=planting or DEFAULT_PLANTING,
        harvest_advice=harvest or DEFAULT_HARVEST,
        drying_advice=drying or DEFAULT_DRYING,
        pest_warning=pest or DEFAULT_PEST,
        irrigation_advice=irrigation or DEFAULT_IRRIGATION,
        temperature=temp,
        humidity=humidity,
        rain_mm=rain,
        region=region,
    )
