"""User-facing messages (Bangla, as shown by the web client)."""

LOAD_FAILED = "ডেটা লোড করা যায়নি"
SAVE_FAILED = "ডেটা সেভ করা যায়নি"
NO_CONTENT_FOUND = "কোনো কনটেন্ট পাওয়া যায়নি"
NO_SUBJECTS_FOUND = "এই ক্লাসের জন্য কোনো বিষয় পাওয়া যায়নি।"
CONTENT_ID_MISSING = "Content ID পাওয়া যায়নি"
PROFILE_NOT_FOUND = "প্রোফাইল ডেটা পাওয়া যায়নি"
PROFILE_SAVED = "প্রোফাইল সেভ হয়েছে!"
PROFILE_SAVE_FAILED = "প্রোফাইল সেভ ব্যর্থ!"
AVATAR_UPLOAD_FAILED = "ছবি আপলোড ব্যর্থ!"
LOGIN_REQUIRED = "অনুগ্রহ করে লগইন করুন (authenticated write প্রয়োজন)।"

CONTENT_ADDED = "নতুন কনটেন্ট যোগ হয়েছে!"
CONTENT_UPDATED = "কনটেন্ট আপডেট হয়েছে!"
CONTENT_DELETED = "কনটেন্ট ডিলিট হয়েছে!"

CONFIRM_DELETE_GRADE = "আপনি কি নিশ্চিতভাবে এই Grade ডিলিট করতে চান? এর সাথে সংশ্লিষ্ট সব Subject, Chapter, Content ডিলিট হবে!"
CONFIRM_DELETE_SUBJECT = "আপনি কি নিশ্চিতভাবে এই Subject ডিলিট করতে চান? এর সাথে সংশ্লিষ্ট সব Chapter, Content ডিলিট হবে!"
CONFIRM_DELETE_CHAPTER = "আপনি কি নিশ্চিতভাবে এই Chapter ডিলিট করতে চান? এর সাথে সংশ্লিষ্ট সব Content ডিলিট হবে!"
