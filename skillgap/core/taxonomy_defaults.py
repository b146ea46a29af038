# Stock skill taxonomy. Consumed only through SkillTaxonomy.default();
# section order and in-section skill order drive review ordering.

DEFAULT_SECTIONS = [
    {
        "key": "programming",
        "title": "Programming Skills",
        "short_label": "Programming",
        "skills": ["Python", "C++", "Java", "Rust", "JavaScript", "C", "PySpark", "SQL", "NoSQL"],
    },
    {
        "key": "dataAnalytics",
        "title": "Data Analytics",
        "short_label": "Analytics",
        "skills": ["Power BI / Tableau", "Visualization Libraries"],
    },
    {
        "key": "dataScience",
        "title": "Data Science",
        "short_label": "Science",
        "skills": [
            "Data Modelling (ML Algorithms)",
            "Statistics (Fundamental statistical concepts)",
            "Dashboards (Power BI, Grafana)",
        ],
    },
    {
        "key": "dataEngineering",
        "title": "Data Engineering",
        "short_label": "Engineering",
        "skills": ["AWS", "GCP", "Azure", "Apache Airflow", "Kubernetes", "Docker", "flyte"],
    },
    {
        "key": "aiDL",
        "title": "AI / Deep Learning",
        "short_label": "AI",
        "skills": ["TensorFlow", "PyTorch", "OpenCV", "Computer Vision Models", "Generative AI (GenAI)"],
    },
    {
        "key": "frontend",
        "title": "Frontend Development",
        "short_label": "Frontend",
        "skills": ["HTML", "CSS", "Bootstrap", "React", "Angular", "Tailwind CSS", "Vue.js", "TypeScript"],
    },
    {
        "key": "backend",
        "title": "Backend Development",
        "short_label": "Backend",
        "skills": ["Django", "Flask", "FastAPI", "Spring Boot", "ASP.NET", "Express.js"],
    },
    {
        "key": "devops",
        "title": "DevOps",
        "short_label": "DevOps",
        "skills": ["Jenkins", "CI/CD"],
    },
    {
        "key": "ADAS",
        "title": "ADAS",
        "short_label": "ADAS",
        "skills": ["Camera calibration/processing", "LiDAR (3D)", "Sensor fusion"],
    },
]

DEFAULT_EXPECTATIONS = {
    "Python": 4,
    "C++": 5,
    "Java": 5,
    "Rust": 3,
    "JavaScript": 3,
    "C": 4,
    "PySpark": 4,
    "SQL": 2,
    "NoSQL": 4,

    "Power BI / Tableau": 3,
    "Visualization Libraries": 3,

    "Data Modelling (ML Algorithms)": 4,
    "Statistics (Fundamental statistical concepts)": 3,
    "Dashboards (Power BI, Grafana)": 3,

    "AWS": 3,
    "GCP": 3,
    "Azure": 3,
    "Apache Airflow": 3,
    "Kubernetes": 3,
    "Docker": 3,
    "flyte": 2,

    "TensorFlow": 4,
    "PyTorch": 4,
    "OpenCV": 3,
    "Computer Vision Models": 4,
    "Generative AI (GenAI)": 3,

    "HTML": 3,
    "CSS": 3,
    "Bootstrap": 3,
    "React": 4,
    "Angular": 2,
    "Tailwind CSS": 3,
    "Vue.js": 2,
    "TypeScript": 3,

    "Django": 3,
    "Flask": 3,
    "FastAPI": 3,
    "Spring Boot": 3,
    "ASP.NET": 2,
    "Express.js": 3,

    "Jenkins": 3,
    "CI/CD": 3,

    "Camera calibration/processing": 4,
    "LiDAR (3D)": 4,
    "Sensor fusion": 4,
}

OTHER_SECTION = {
    "key": "other",
    "title": "Other / Misc",
    "short_label": "Other",
}
