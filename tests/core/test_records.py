from src.attendease.core.records import (
    AlertCollection,
    AttendanceReport,
    StudentProfile,
)


def test_report_from_payload_coerces_fields():
    report = AttendanceReport.from_payload(
        {
            "subject": "DBMS",
            "total_students": "60",
            "present_count": 52,
            "absent_count": True,
            "attendance_percentage": "86.7%",
            "absentee_list": ["Rahul Sharma (101)", 108, None, {"x": 1}],
            "report_summary": ["not", "text"],
        }
    )

    assert report.subject == "DBMS"
    assert report.total_students == 60
    assert report.present_count == 52
    assert report.absent_count is None
    assert report.attendance_percentage == 86.7
    assert report.absentee_list == ["Rahul Sharma (101)", "108"]
    assert report.report_summary is None


def test_report_display_substitutes_defaults():
    shown = AttendanceReport(subject="DBMS", attendance_percentage=86.7).display()

    assert shown == {
        "subject": "DBMS",
        "total_students": 0,
        "present_count": 0,
        "absent_count": 0,
        "attendance_percentage": 86.7,
        "trend_summary": "",
        "absentee_list": [],
        "report_summary": "",
    }


def test_profile_subject_rows_skip_non_mappings():
    profile = StudentProfile.from_payload(
        {
            "student_name": "Rahul Sharma",
            "roll_number": 101,
            "subject_wise_attendance": [
                {"subject": "MEFA", "classes_attended": 18, "total_classes": 22, "percentage": 81.8},
                "bogus",
                {"subject": "DBMS"},
            ],
        }
    )

    assert profile.roll_number == "101"
    assert [row.subject for row in profile.subject_wise_attendance] == ["MEFA", "DBMS"]

    shown = profile.display()
    assert shown["status"] == "Unknown"
    assert shown["remarks"] == ""
    assert shown["subject_wise_attendance"][1] == {
        "subject": "DBMS",
        "classes_attended": 0,
        "total_classes": 0,
        "percentage": 0,
    }


def test_profile_with_non_list_subjects_is_absent():
    profile = StudentProfile.from_payload({"subject_wise_attendance": {"subject": "OS"}})
    assert profile.subject_wise_attendance is None
    assert profile.display()["subject_wise_attendance"] == []


def test_alert_collection_total_defaults_to_alert_count():
    alerts = AlertCollection.from_payload(
        {
            "threshold_percentage": 75,
            "alerts": [
                {"student_name": "Priya Patel", "subject": "OS", "severity": "Warning"},
                {"student_name": "Amit Kumar", "classes_missed": "7"},
            ],
        }
    )

    shown = alerts.display()
    assert shown["total_alerts"] == 2
    assert shown["alert_date"] == "--"
    assert shown["alerts"][1]["severity"] == "Unknown"
    assert shown["alerts"][1]["classes_missed"] == 7


def test_empty_payload_is_all_absent():
    alerts = AlertCollection.from_payload({})
    assert alerts.to_dict() == {
        "alert_date": None,
        "threshold_percentage": None,
        "alerts": None,
        "total_alerts": None,
        "summary": None,
    }


def test_non_finite_numbers_are_absent():
    report = AttendanceReport.from_payload(
        {
            "attendance_percentage": "NaN",
            "total_students": float("inf"),
            "present_count": "-Infinity",
            "absent_count": float("nan"),
        }
    )
    assert report.attendance_percentage is None
    assert report.total_students is None
    assert report.present_count is None
    assert report.absent_count is None
    assert report.display()["attendance_percentage"] == 0
