# =============================================================================
# madrasa_core/i18n/translations.py
# English / Urdu translation tables
# =============================================================================

from __future__ import annotations
from typing import Dict

EN: Dict[str, str] = {
    # Branding
    "app.title": "Madrasa",
    "app.subtitle": "Management Kit",
    "app.welcome": "Welcome to Madrasa Manager",
    "app.tagline": "Students, teachers, fees and Quran progress in one place, online or offline.",

    # Navigation
    "nav.dashboard": "Dashboard",
    "nav.students": "Students",
    "nav.teachers": "Teachers",
    "nav.classes": "Classes",
    "nav.courses": "Courses",
    "nav.attendance": "Attendance",
    "nav.fees": "Fees",
    "nav.expenses": "Expenses",
    "nav.education_reports": "Learning Report",
    "nav.reports": "Reports",
    "nav.user_roles": "User Roles",
    "nav.profile": "My Account",

    # Common actions
    "common.add": "Add",
    "common.edit": "Edit",
    "common.delete": "Delete",
    "common.cancel": "Cancel",
    "common.save": "Save",
    "common.search": "Search",
    "common.filter": "Filter",
    "common.export": "Export",
    "common.download": "Download",
    "common.select": "Select",
    "common.none": "None",
    "common.no_records": "No records yet.",
    "common.saved": "Saved successfully",
    "common.deleted": "Deleted successfully",
    "common.confirm_delete": "Delete this record?",
    "common.language": "Language",
    "common.sign_out": "Sign Out",
    "common.unknown": "Unknown",
    "common.total": "Total",
    "common.from": "From",
    "common.to": "To",
    "common.month": "Month",
    "common.year": "Year",

    # Auth
    "auth.sign_in": "Sign In",
    "auth.email": "Email",
    "auth.password": "Password",
    "auth.failed": "Invalid email or password",
    "auth.required": "Please sign in to continue.",
    "auth.admin_required": "Only administrators can open this page.",
    "auth.signed_in_as": "Signed in as {email}",
    "auth.offline_unavailable": "Sign-in needs an internet connection.",
    "auth.sign_up": "Sign Up",
    "auth.full_name": "Full name",
    "auth.madrasa_name": "Madrasa name",
    "auth.password_short": "Password must be at least {count} characters",
    "auth.fill_all": "Please fill in all fields",
    "auth.sign_up_done": "Account created! Please check your email to confirm it.",
    "auth.sign_up_failed": "Could not create the account: {error}",
    "auth.join": "Join a madrasa",
    "auth.select_madrasa": "Select madrasa",
    "auth.no_madrasas": "No madrasa available",
    "auth.join_submit": "Send request",
    "auth.join_sent": "Request submitted! Wait for the admin's approval.",
    "auth.join_failed": "Could not submit the request: {error}",
    "auth.join_hint": "Your request goes to the madrasa admin. You will receive an email once it is approved.",

    # Offline / sync
    "sync.online": "Online",
    "sync.offline": "Offline",
    "sync.syncing": "Syncing...",
    "sync.synced": "All changes synced",
    "sync.pending_count": "{count} changes pending",
    "sync.error_state": "Sync error",
    "sync.sync_now": "Sync now",
    "sync.went_offline": "You are offline. Changes are being saved locally.",
    "sync.back_online": "Back online! Syncing data...",
    "sync.saved_offline": "Saved offline. {pending} changes will sync when you are back online.",
    "sync.complete": "All changes synced ({count})",
    "sync.partial": "{applied} changes synced, {pending} still pending",
    "sync.error": "Sync problem: {error}",
    "sync.offline_cannot_sync": "You are offline! Cannot sync.",
    "sync.dead_letters": "{count} changes could not be synced",
    "sync.retry_failed": "Retry failed changes",
    "sync.offline_unavailable": "This section needs an internet connection.",
    "error.validation": "Please check the form: {detail}",
    "error.remote": "The server rejected the request. Please try again.",
    "error.cache": "Local storage could not be read or written.",
    "error.sync": "Changes could not be synced.",
    "error.report": "The report could not be generated.",
    "error.config": "The app is not configured correctly.",
    "error.unexpected": "Something went wrong.",
    "error.contact_support": "Please contact the administrator.",
    "error.details": "Error details",
    "dashboard.chart_unavailable": "Chart unavailable",
    "sync.last_online": "Last online {time}",

    # Dashboard
    "dashboard.total_students": "Total Students",
    "dashboard.active_students": "Active Students",
    "dashboard.total_teachers": "Total Teachers",
    "dashboard.total_classes": "Active Classes",
    "dashboard.attendance_rate": "Attendance Rate (today)",
    "dashboard.fee_collection": "Fee Collection",
    "dashboard.recent_students": "Recently added students",

    # Fields
    "field.name": "Name",
    "field.father_name": "Father's Name",
    "field.class_id": "Class",
    "field.admission_date": "Admission Date",
    "field.contact": "Contact",
    "field.age": "Age",
    "field.grade": "Grade",
    "field.status": "Status",
    "field.photo_url": "Photo URL",
    "field.qualification": "Qualification",
    "field.subject": "Subject",
    "field.email": "Email",
    "field.full_name": "Full Name",
    "field.madrasa_name": "Madrasa",
    "field.specialization": "Specialization",
    "field.classes_count": "Classes",
    "field.students_count": "Students",
    "field.section": "Section",
    "field.teacher_id": "Teacher",
    "field.year": "Year",
    "field.schedule": "Schedule",
    "field.duration": "Duration",
    "field.room": "Room",
    "field.level": "Level",
    "field.title": "Title",
    "field.description": "Description",
    "field.modules": "Modules",
    "field.progress": "Progress",
    "field.date": "Date",
    "field.student_id": "Student",
    "field.time": "Time",
    "field.noted_by": "Noted By",
    "field.amount": "Amount",
    "field.due_date": "Due Date",
    "field.fee_type": "Fee Type",
    "field.academic_year": "Academic Year",
    "field.payment_screenshot_url": "Payment Screenshot",
    "field.type": "Type",
    "field.category": "Category",
    "field.payment_method": "Payment Method",
    "field.receipt_url": "Receipt",
    "field.month": "Month",
    "field.remarks": "Remarks",
    "field.user_id": "User",
    "field.role": "Role",
    "field.requested_role": "Requested Role",
    "field.request_message": "Message",
    "field.admin_response": "Admin Response",
    "field.created_at": "Created",

    # Status values
    "status.active": "Active",
    "status.inactive": "Inactive",
    "status.graduated": "Graduated",
    "status.present": "Present",
    "status.absent": "Absent",
    "status.late": "Late",
    "status.excused": "Excused",
    "status.paid": "Paid",
    "status.pending": "Pending",
    "status.overdue": "Overdue",
    "status.partial": "Partial",
    "status.approved": "Approved",
    "status.rejected": "Rejected",
    "status.on_track": "On track",
    "status.warning": "Near limit",
    "status.exceeded": "Exceeded",
    "status.income": "Income",
    "status.expense": "Expense",

    # Education report
    "education.sabak": "Sabak (new lesson)",
    "education.sabqi": "Sabqi (recent revision)",
    "education.manzil": "Manzil (old revision)",
    "education.para_no": "Para No.",
    "education.recited": "Recited",
    "education.heard_by": "Heard By",
    "education.number": "Number",

    # Expenses / budgets
    "expenses.income": "Income",
    "expenses.expense": "Expense",
    "expenses.balance": "Balance",
    "expenses.budgets": "Budgets",
    "expenses.budget.spent": "Spent",
    "expenses.budget.remaining": "Remaining",
    "expenses.analytics": "Financial Analytics",
    "expenses.trend": "Last 6 months",

    # Attendance
    "attendance.mark_class": "Mark attendance for a class",
    "attendance.summary": "Attendance summary",
    "attendance.saved": "Attendance saved ({created} new, {updated} updated)",

    # Reports
    "reports.students": "Students list",
    "reports.fees": "Financial Report",
    "reports.attendance": "Attendance Report",
    "reports.education": "Education Report",
    "reports.generate": "Generate PDF",
    "reports.generated": "Generated",
    "reports.period": "Period",
    "reports.page": "Page {page}",

    # Roles
    "roles.assign": "Assign role",
    "roles.pending": "Pre-assigned roles (by email)",
    "roles.requests": "Role change requests",
    "roles.approve": "Approve",
    "roles.reject": "Reject",
    "roles.request_change": "Request a role change",
    "roles.my_requests": "My requests",
    "role.admin": "Admin",
    "role.teacher": "Teacher",
    "role.staff": "Staff",
    "role.parent": "Parent",

    # Profile
    "profile.madrasa_name": "Madrasa Name",
    "profile.full_name": "Full Name",
    "profile.avatar": "Profile Photo",
    "profile.updated": "Profile updated",
}


UR: Dict[str, str] = {
    # Branding
    "app.title": "مدرسہ",
    "app.subtitle": "مینجمنٹ کٹ",
    "app.welcome": "مدرسہ مینیجر میں خوش آمدید",
    "app.tagline": "طلباء، اساتذہ، فیس اور قرآنی ترقی ایک جگہ، آن لائن یا آف لائن۔",

    # Navigation
    "nav.dashboard": "ڈیش بورڈ",
    "nav.students": "طلباء",
    "nav.teachers": "اساتذہ",
    "nav.classes": "کلاسز",
    "nav.courses": "کورسز",
    "nav.attendance": "حاضری",
    "nav.fees": "فیس",
    "nav.expenses": "اخراجات",
    "nav.education_reports": "تعلیمی رپورٹ",
    "nav.reports": "رپورٹس",
    "nav.user_roles": "صارف کے کردار",
    "nav.profile": "میرا اکاؤنٹ",

    # Common actions
    "common.add": "شامل کریں",
    "common.edit": "ترمیم",
    "common.delete": "حذف کریں",
    "common.cancel": "منسوخ",
    "common.save": "محفوظ کریں",
    "common.search": "تلاش کریں",
    "common.filter": "فلٹر",
    "common.export": "ایکسپورٹ",
    "common.download": "ڈاؤن لوڈ",
    "common.select": "منتخب کریں",
    "common.none": "کوئی نہیں",
    "common.no_records": "ابھی کوئی ریکارڈ نہیں۔",
    "common.saved": "کامیابی سے محفوظ ہو گیا",
    "common.deleted": "کامیابی سے حذف ہو گیا",
    "common.confirm_delete": "کیا یہ ریکارڈ حذف کریں؟",
    "common.language": "زبان",
    "common.sign_out": "سائن آؤٹ",
    "common.unknown": "نامعلوم",
    "common.total": "کل",
    "common.from": "سے",
    "common.to": "تک",
    "common.month": "مہینہ",
    "common.year": "سال",

    # Auth
    "auth.sign_in": "سائن ان",
    "auth.email": "ای میل",
    "auth.password": "پاس ورڈ",
    "auth.failed": "غلط ای میل یا پاس ورڈ",
    "auth.required": "جاری رکھنے کے لیے سائن ان کریں۔",
    "auth.admin_required": "یہ صفحہ صرف ایڈمن کے لیے ہے۔",
    "auth.signed_in_as": "{email} کے طور پر سائن ان",
    "auth.offline_unavailable": "سائن ان کے لیے انٹرنیٹ ضروری ہے۔",
    "auth.sign_up": "سائن اپ",
    "auth.full_name": "مکمل نام",
    "auth.madrasa_name": "مدرسے کا نام",
    "auth.password_short": "پاس ورڈ کم از کم {count} حروف کا ہونا چاہیے",
    "auth.fill_all": "تمام فیلڈز پُر کریں",
    "auth.sign_up_done": "اکاؤنٹ بن گیا! تصدیق کے لیے اپنا ای میل چیک کریں",
    "auth.sign_up_failed": "اکاؤنٹ نہیں بن سکا: {error}",
    "auth.join": "مدرسے میں شامل ہوں",
    "auth.select_madrasa": "مدرسہ منتخب کریں",
    "auth.no_madrasas": "کوئی مدرسہ دستیاب نہیں",
    "auth.join_submit": "درخواست بھیجیں",
    "auth.join_sent": "درخواست جمع کرا دی گئی! ایڈمن کی منظوری کا انتظار کریں",
    "auth.join_failed": "درخواست جمع کرانے میں خرابی: {error}",
    "auth.join_hint": "آپ کی درخواست ایڈمن کو بھیج دی جائے گی۔ منظوری کے بعد آپ کو ای میل موصول ہو گی",

    # Offline / sync
    "sync.online": "آن لائن",
    "sync.offline": "آف لائن",
    "sync.syncing": "sync ہو رہا ہے...",
    "sync.synced": "تمام تبدیلیاں sync ہو گئیں",
    "sync.pending_count": "{count} تبدیلیاں منتظر",
    "sync.error_state": "Sync میں مسئلہ",
    "sync.sync_now": "ابھی sync کریں",
    "sync.went_offline": "آف لائن ہو گئے! تبدیلیاں محفوظ ہو رہی ہیں",
    "sync.back_online": "آن لائن ہو گئے! ڈیٹا sync ہو رہا ہے...",
    "sync.saved_offline": "آف لائن محفوظ ہو گیا۔ {pending} تبدیلیاں آن لائن ہونے پر sync ہوں گی",
    "sync.complete": "تمام تبدیلیاں sync ہو گئیں ({count})",
    "sync.partial": "{applied} تبدیلیاں sync ہو گئیں، {pending} ابھی باقی ہیں",
    "sync.error": "Sync میں مسئلہ: {error}",
    "sync.offline_cannot_sync": "آف لائن ہیں! sync نہیں ہو سکتا",
    "sync.dead_letters": "{count} تبدیلیاں sync نہیں ہو سکیں",
    "sync.retry_failed": "ناکام تبدیلیاں دوبارہ بھیجیں",
    "sync.offline_unavailable": "اس حصے کے لیے انٹرنیٹ ضروری ہے۔",
    "error.validation": "فارم چیک کریں: {detail}",
    "error.remote": "سرور نے درخواست قبول نہیں کی۔ دوبارہ کوشش کریں۔",
    "error.cache": "مقامی اسٹوریج پڑھی یا لکھی نہیں جا سکی۔",
    "error.sync": "تبدیلیاں sync نہیں ہو سکیں۔",
    "error.report": "رپورٹ نہیں بن سکی۔",
    "error.config": "ایپ کی ترتیب درست نہیں۔",
    "error.unexpected": "کچھ غلط ہو گیا۔",
    "error.contact_support": "براہ کرم ایڈمن سے رابطہ کریں۔",
    "error.details": "خرابی کی تفصیل",
    "dashboard.chart_unavailable": "چارٹ دستیاب نہیں",
    "sync.last_online": "آخری بار آن لائن {time}",

    # Dashboard
    "dashboard.total_students": "کل طلباء",
    "dashboard.active_students": "فعال طلباء",
    "dashboard.total_teachers": "کل اساتذہ",
    "dashboard.total_classes": "فعال کلاسز",
    "dashboard.attendance_rate": "حاضری کی شرح (آج)",
    "dashboard.fee_collection": "فیس وصولی",
    "dashboard.recent_students": "حال ہی میں شامل طلباء",

    # Fields
    "field.name": "نام",
    "field.father_name": "والد کا نام",
    "field.class_id": "کلاس",
    "field.admission_date": "داخلے کی تاریخ",
    "field.contact": "رابطہ",
    "field.age": "عمر",
    "field.grade": "درجہ",
    "field.status": "حیثیت",
    "field.photo_url": "تصویر",
    "field.qualification": "قابلیت",
    "field.subject": "مضمون",
    "field.email": "ای میل",
    "field.full_name": "مکمل نام",
    "field.madrasa_name": "مدرسہ",
    "field.specialization": "تخصص",
    "field.classes_count": "کلاسز",
    "field.students_count": "طلباء",
    "field.section": "سیکشن",
    "field.teacher_id": "استاد",
    "field.year": "سال",
    "field.schedule": "شیڈول",
    "field.duration": "دورانیہ",
    "field.room": "کمرہ",
    "field.level": "سطح",
    "field.title": "عنوان",
    "field.description": "تفصیل",
    "field.modules": "ماڈیولز",
    "field.progress": "پیش رفت",
    "field.date": "تاریخ",
    "field.student_id": "طالب علم",
    "field.time": "وقت",
    "field.noted_by": "درج کنندہ",
    "field.amount": "رقم",
    "field.due_date": "آخری تاریخ",
    "field.fee_type": "فیس کی قسم",
    "field.academic_year": "تعلیمی سال",
    "field.payment_screenshot_url": "ادائیگی کا اسکرین شاٹ",
    "field.type": "قسم",
    "field.category": "زمرہ",
    "field.payment_method": "ادائیگی کا طریقہ",
    "field.receipt_url": "رسید",
    "field.month": "مہینہ",
    "field.remarks": "تبصرہ",
    "field.user_id": "صارف",
    "field.role": "کردار",
    "field.requested_role": "مطلوبہ کردار",
    "field.request_message": "پیغام",
    "field.admin_response": "ایڈمن کا جواب",
    "field.created_at": "تاریخ اندراج",

    # Status values
    "status.active": "فعال",
    "status.inactive": "غیر فعال",
    "status.graduated": "فارغ التحصیل",
    "status.present": "حاضر",
    "status.absent": "غائب",
    "status.late": "تاخیر",
    "status.excused": "معذور",
    "status.paid": "ادا شدہ",
    "status.pending": "زیر التواء",
    "status.overdue": "مقررہ تاریخ گزر گئی",
    "status.partial": "جزوی",
    "status.approved": "منظور شدہ",
    "status.rejected": "مسترد",
    "status.on_track": "درست",
    "status.warning": "حد کے قریب",
    "status.exceeded": "حد سے تجاوز",
    "status.income": "آمدنی",
    "status.expense": "خرچ",

    # Education report
    "education.sabak": "سبق",
    "education.sabqi": "سبقی",
    "education.manzil": "منزل",
    "education.para_no": "پارہ نمبر",
    "education.recited": "سنایا",
    "education.heard_by": "سننے والا",
    "education.number": "نمبر",

    # Expenses / budgets
    "expenses.income": "آمدنی",
    "expenses.expense": "خرچ",
    "expenses.balance": "بیلنس",
    "expenses.budgets": "بجٹ",
    "expenses.budget.spent": "خرچ شدہ",
    "expenses.budget.remaining": "باقی",
    "expenses.analytics": "مالیاتی تجزیہ",
    "expenses.trend": "پچھلے 6 مہینے",

    # Attendance
    "attendance.mark_class": "کلاس کی حاضری لگائیں",
    "attendance.summary": "حاضری کا خلاصہ",
    "attendance.saved": "حاضری محفوظ ہو گئی ({created} نئی، {updated} تبدیل)",

    # Reports
    "reports.students": "طلباء کی فہرست",
    "reports.fees": "مالیاتی رپورٹ",
    "reports.attendance": "حاضری رپورٹ",
    "reports.education": "تعلیمی رپورٹ",
    "reports.generate": "PDF بنائیں",
    "reports.generated": "تیار کردہ",
    "reports.period": "مدت",
    "reports.page": "صفحہ {page}",

    # Roles
    "roles.assign": "کردار تفویض کریں",
    "roles.pending": "ای میل کے ذریعے پہلے سے تفویض کردار",
    "roles.requests": "کردار کی تبدیلی کی درخواستیں",
    "roles.approve": "منظور کریں",
    "roles.reject": "مسترد کریں",
    "roles.request_change": "کردار کی تبدیلی کی درخواست",
    "roles.my_requests": "میری درخواستیں",
    "role.admin": "ایڈمن",
    "role.teacher": "استاد",
    "role.staff": "عملہ",
    "role.parent": "والدین",

    # Profile
    "profile.madrasa_name": "مدرسہ کا نام",
    "profile.full_name": "پورا نام",
    "profile.avatar": "پروفائل تصویر",
    "profile.updated": "پروفائل اپ ڈیٹ ہو گئی",
}


TRANSLATIONS: Dict[str, Dict[str, str]] = {
    "en": EN,
    "ur": UR,
}
