"""Accepted spreadsheet headers per logical field.

Order matters: the first alias with a non-empty value wins. Headers are
compared ignoring case, spaces and underscores (see rows.header_key).
"""

CLASS_NAME = ("ClassName", "Kelas", "NamaKelas")
SUBJECT = ("Subject", "Mapel", "MataPelajaran")
DAY = ("Day", "Hari")
START_TIME = ("StartTime", "JamMulai", "Mulai", "Start", "JAM MULAI (HH:MM)")
END_TIME = ("EndTime", "JamSelesai", "Selesai", "End", "JAM SELESAI (HH:MM)")
TEACHER = ("TeacherEmail", "EmailGuru", "Teacher", "Guru")

USER_NAME = ("Name", "Nama")
EMAIL = ("Email", "Username_Email")
PASSWORD = ("Password",)
ROLE = ("Role",)
USER_SUBJECTS = ("Subjects", "Subject", "Mapel", "MataPelajaran")
