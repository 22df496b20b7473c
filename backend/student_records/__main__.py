from student_records.main import run

run()
