# --- Configuration --------------------------------------------------------------------------------

# FUK ladder used by score_to_fuk: first threshold the score is strictly above wins.
FUK_THRESHOLDS = [
    (0.85, 1.00),
    (0.75, 0.75),
    (0.50, 0.50),
    (0.00, 0.25),
]
FUK_LEVELS = [0.00, 0.25, 0.50, 0.75, 1.00]

# Presentation buckets, evaluated with >= (not the same boundaries as FUK_THRESHOLDS).
FUK_LABELS = [
    (0.85, "Sangat Baik"),
    (0.75, "Baik"),
    (0.50, "Cukup"),
    (0.25, "Kurang"),
]
FUK_LABEL_NONE = "Tidak Ada"

FUK_COLOR_CLASSES = [
    (0.85, "text-green-600 bg-green-100"),
    (0.75, "text-blue-600 bg-blue-100"),
    (0.50, "text-yellow-600 bg-yellow-100"),
    (0.25, "text-orange-600 bg-orange-100"),
]
FUK_COLOR_CLASS_NONE = "text-red-600 bg-red-100"

DEFAULT_WEIGHT = 1
DEFAULT_MAX_SCORE = 1

ASSESSMENT_STATUSES = [
    {"label": "Draft", "value": "draft"},
    {"label": "In progress", "value": "in_progress"},
    {"label": "Submitted", "value": "submitted"},
    {"label": "Verified", "value": "verified"},
    {"label": "Completed", "value": "completed"},
]

# KKAs scoring below this get an Area of Improvement.
AOI_THRESHOLD = 0.5
# (upper bound in percent, priority), checked in order.
AOI_PRIORITIES = [
    (25, "critical"),
    (35, "high"),
]
AOI_DEFAULT_PRIORITY = "medium"
AOI_DUE_DAYS = 90
AOI_NAME = "Perbaikan {kka}"
AOI_RECOMMENDATION = (
    "KKA {kka} memiliki skor {pct}% yang masih di bawah standar. "
    "Perlu dilakukan perbaikan untuk meningkatkan skor menjadi minimal {target}%."
)

# ACGS checklist: "Yes" scores 1, anything else 0, "N/A" is left out entirely.
ACGS_YES = "Yes"
ACGS_NOT_APPLICABLE = "N/A"
# Level bands on the 0..100 overall score, both ends inclusive; first match by level wins.
ACGS_CRITERIA = [
    {"level": 1, "min_score": 60.00, "max_score": 69.99, "nama": "Minimum Requirement"},
    {"level": 2, "min_score": 70.00, "max_score": 79.99, "nama": "Fair"},
    {"level": 3, "min_score": 80.00, "max_score": 89.99, "nama": "Good"},
    {"level": 4, "min_score": 90.00, "max_score": 100.00, "nama": "Excellent"},
    {"level": 5, "min_score": 100.01, "max_score": 150.00, "nama": "Leadership"},
]

# PUGKI recommendations below this score (0..1), or marked Explain, need improvement.
PUGKI_AOI_THRESHOLD = 0.80
PUGKI_EXPLAIN = "Explain"
PUGKI_AOI_TEXT = "Perbaikan diperlukan untuk: {nama}"

# Sample GCG dictionary (KKA -> Aspect -> Parameter -> Factor), ordered by `sort`.
GCG_DICTIONARY = [
    {
        "id": "KKA-1",
        "kode": "I",
        "nama": "Komitmen terhadap Penerapan Tata Kelola secara Berkelanjutan",
        "weight": 1.0,
        "sort": 1,
        "aspects": [
            {
                "id": "ASP-1.1",
                "kode": "1.1",
                "nama": "Pedoman Tata Kelola Perusahaan",
                "weight": 1.0,
                "sort": 1,
                "parameters": [
                    {
                        "id": "PAR-1.1.1",
                        "kode": "1.1.1",
                        "nama": "Perusahaan memiliki Pedoman GCG dan Pedoman Perilaku",
                        "weight": 1.0,
                        "sort": 1,
                        "factors": [
                            {
                                "id": "F-1.1.1.1",
                                "kode": "a",
                                "nama": "Pedoman GCG telah ditetapkan Direksi dan Dewan Komisaris.",
                                "max_score": 1,
                                "sort": 1,
                            },
                            {
                                "id": "F-1.1.1.2",
                                "kode": "b",
                                "nama": "Pedoman Perilaku (code of conduct) disosialisasikan kepada seluruh insan perusahaan.",
                                "max_score": 1,
                                "sort": 2,
                            },
                            {
                                "id": "F-1.1.1.3",
                                "kode": "c",
                                "nama": "Pedoman direviu dan dimutakhirkan secara berkala.",
                                "max_score": 1,
                                "sort": 3,
                            },
                        ],
                    },
                ],
            },
            {
                "id": "ASP-1.2",
                "kode": "1.2",
                "nama": "Sosialisasi dan Evaluasi Penerapan GCG",
                "weight": 0.8,
                "sort": 2,
                "parameters": [
                    {
                        "id": "PAR-1.2.1",
                        "kode": "1.2.1",
                        "nama": "Perusahaan melaksanakan pengukuran penerapan GCG",
                        "weight": 1.0,
                        "sort": 1,
                        "factors": [
                            {
                                "id": "F-1.2.1.1",
                                "kode": "a",
                                "nama": "Assessment GCG dilakukan secara berkala oleh pihak independen.",
                                "max_score": 1,
                                "sort": 1,
                            },
                            {
                                "id": "F-1.2.1.2",
                                "kode": "b",
                                "nama": "Hasil assessment ditindaklanjuti dengan rencana perbaikan (AOI).",
                                "max_score": 1,
                                "sort": 2,
                            },
                        ],
                    },
                ],
            },
        ],
    },
    {
        "id": "KKA-2",
        "kode": "II",
        "nama": "Pemegang Saham dan RUPS",
        "weight": 0.9,
        "sort": 2,
        "aspects": [
            {
                "id": "ASP-2.1",
                "kode": "2.1",
                "nama": "Penyelenggaraan RUPS",
                "weight": 1.0,
                "sort": 1,
                "parameters": [
                    {
                        "id": "PAR-2.1.1",
                        "kode": "2.1.1",
                        "nama": "RUPS menetapkan kebijakan pengangkatan anggota Direksi dan Dewan Komisaris",
                        "weight": 0.6,
                        "sort": 1,
                        "factors": [
                            {
                                "id": "F-2.1.1.1",
                                "kode": "a",
                                "nama": "Kebijakan dan prosedur nominasi ditetapkan secara tertulis.",
                                "max_score": 1,
                                "sort": 1,
                            },
                            {
                                "id": "F-2.1.1.2",
                                "kode": "b",
                                "nama": "Proses pengangkatan melalui uji kelayakan dan kepatutan.",
                                "max_score": 1,
                                "sort": 2,
                            },
                        ],
                    },
                    {
                        "id": "PAR-2.1.2",
                        "kode": "2.1.2",
                        "nama": "RUPS memberikan persetujuan RKAP",
                        "weight": 0.4,
                        "sort": 2,
                        "factors": [
                            {
                                "id": "F-2.1.2.1",
                                "kode": "a",
                                "nama": "RKAP disahkan sebelum tahun anggaran berjalan.",
                                "max_score": 1,
                                "sort": 1,
                            },
                        ],
                    },
                ],
            },
        ],
    },
    {
        "id": "KKA-3",
        "kode": "III",
        "nama": "Dewan Komisaris",
        "weight": 0.8,
        "sort": 3,
        "aspects": [
            {
                "id": "ASP-3.1",
                "kode": "3.1",
                "nama": "Program Pengenalan dan Peningkatan Kapabilitas",
                "weight": 0.5,
                "sort": 1,
                "parameters": [
                    {
                        "id": "PAR-3.1.1",
                        "kode": "3.1.1",
                        "nama": "Dewan Komisaris melaksanakan program pengenalan",
                        "weight": 1.0,
                        "sort": 1,
                        "factors": [
                            {
                                "id": "F-3.1.1.1",
                                "kode": "a",
                                "nama": "Program pengenalan dilaksanakan bagi komisaris baru.",
                                "max_score": 1,
                                "sort": 1,
                            },
                        ],
                    },
                ],
            },
            {
                "id": "ASP-3.2",
                "kode": "3.2",
                "nama": "Pengawasan terhadap Direksi",
                "weight": 1.0,
                "sort": 2,
                "parameters": [
                    {
                        "id": "PAR-3.2.1",
                        "kode": "3.2.1",
                        "nama": "Dewan Komisaris memberikan arahan terhadap pengelolaan perusahaan",
                        "weight": 1.0,
                        "sort": 1,
                        "factors": [
                            {
                                "id": "F-3.2.1.1",
                                "kode": "a",
                                "nama": "Arahan tentang kebijakan teknologi informasi dan sistem manajemen risiko.",
                                "max_score": 1,
                                "sort": 1,
                            },
                            {
                                "id": "F-3.2.1.2",
                                "kode": "b",
                                "nama": "Pengawasan atas pelaksanaan RJPP dan RKAP dilakukan secara berkala.",
                                "max_score": 1,
                                "sort": 2,
                            },
                        ],
                    },
                ],
            },
        ],
    },
]
